from enum import Enum

# Member names equal their stored values so members hash and compare like the
# plain strings found in stored documents.


class ExpenseCategory(str, Enum):
    stock_purchase = "stock_purchase"
    uber_delivery = "uber_delivery"
    salary = "salary"
    meta_ads = "meta_ads"
    equipment = "equipment"
    consumables = "consumables"
    utilities = "utilities"
    other = "other"


class StockCategory(str, Enum):
    meat = "meat"
    vegetable = "vegetable"
    spice = "spice"
    dairy = "dairy"
    grocery = "grocery"
    beverage = "beverage"
    other = "other"


class ConsumableCategory(str, Enum):
    packaging = "packaging"
    cleaning = "cleaning"
    stationery = "stationery"
    other = "other"


class RevenueSource(str, Enum):
    online = "online"
    cash = "cash"
    other = "other"


EXPENSE_CATEGORY_LABELS = {
    ExpenseCategory.stock_purchase: "Stock Purchase",
    ExpenseCategory.uber_delivery: "Uber/Delivery",
    ExpenseCategory.salary: "Salaries",
    ExpenseCategory.meta_ads: "Meta Ads",
    ExpenseCategory.equipment: "Equipment",
    ExpenseCategory.consumables: "Consumables",
    ExpenseCategory.utilities: "Utilities",
    ExpenseCategory.other: "Other",
}

STOCK_CATEGORY_LABELS = {
    StockCategory.meat: "Meat",
    StockCategory.vegetable: "Vegetables",
    StockCategory.spice: "Spices",
    StockCategory.dairy: "Dairy",
    StockCategory.grocery: "Grocery",
    StockCategory.beverage: "Beverages",
    StockCategory.other: "Other",
}

CONSUMABLE_CATEGORY_LABELS = {
    ConsumableCategory.packaging: "Packaging",
    ConsumableCategory.cleaning: "Cleaning",
    ConsumableCategory.stationery: "Stationery",
    ConsumableCategory.other: "Other",
}

REVENUE_SOURCE_LABELS = {
    RevenueSource.online: "Online",
    RevenueSource.cash: "Cash",
    RevenueSource.other: "Other",
}

COMMON_UNITS = ("kg", "g", "pcs", "ltr", "ml", "box", "pack", "bottle", "can", "dozen")

# Sentinel accepted by the category filter to mean "no category restriction".
ALL_CATEGORIES = "all"

EXPENSES_COLLECTION = "expenses"
REVENUE_COLLECTION = "revenue"
STOCK_COLLECTION = "stock"
CONSUMABLES_COLLECTION = "consumables"

COLLECTIONS = (
    EXPENSES_COLLECTION,
    REVENUE_COLLECTION,
    STOCK_COLLECTION,
    CONSUMABLES_COLLECTION,
)

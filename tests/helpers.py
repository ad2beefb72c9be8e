import itertools

from sqlalchemy.orm import sessionmaker

from shopledger.database.base import Base
from shopledger.database.engine import build_engine
from shopledger.schemas.expense import Expense, RevenueEntry
from shopledger.schemas.inventory import ConsumableItem, StockItem
from shopledger.store.sql_store import SqlRecordStore

_ids = itertools.count(1)


def make_store():
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    return SqlRecordStore(session_factory), engine


def expense(day, category, amount, item="Item", notes=None, created_at=None):
    number = next(_ids)
    return Expense(
        id="e{}".format(number),
        date=day,
        category=category,
        item=item,
        amount=amount,
        notes=notes,
        created_at=created_at or "{}T10:00:{:02d}+00:00".format(day, number % 60),
    )


def revenue(day, amount, source="cash", notes=None):
    number = next(_ids)
    return RevenueEntry(
        id="r{}".format(number),
        date=day,
        amount=amount,
        source=source,
        notes=notes,
        created_at="{}T20:00:00+00:00".format(day),
    )


def stock_item(name, current_quantity, min_level, category="meat"):
    return StockItem(
        id="s{}".format(next(_ids)),
        name=name,
        category=category,
        current_quantity=current_quantity,
        min_level=min_level,
    )


def consumable(name, current_quantity, min_level, category="packaging"):
    return ConsumableItem(
        id="c{}".format(next(_ids)),
        name=name,
        category=category,
        current_quantity=current_quantity,
        min_level=min_level,
    )

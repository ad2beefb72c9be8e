import argparse
from datetime import date, timedelta

from sqlalchemy import delete, select

from shopledger.config import get_settings
from shopledger.core.logging import setup_logging
from shopledger.core.session import SessionContext
from shopledger.database import Base, engine, session_scope
from shopledger.models.record import CollectionVersion, Record
from shopledger.services.ledger_service import LedgerService
from shopledger.store import SqlRecordStore


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample ledger data.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing records before seeding.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL for this run.",
    )
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging(args.log_level)

    Base.metadata.create_all(bind=engine)

    with session_scope() as db:
        if args.reset:
            db.execute(delete(Record))
            db.execute(delete(CollectionVersion))
            db.flush()
        has_records = db.execute(select(Record.id).limit(1)).first()

    if has_records:
        print("Seed skipped: records already exist.")
        return

    session = SessionContext(user_id=get_settings().DEFAULT_USER_ID, user_name="Seed")
    service = LedgerService(SqlRecordStore())
    today = date.today()
    yesterday = today - timedelta(days=1)

    expenses = [
        dict(date=yesterday.isoformat(), category="stock_purchase", item="Beef", quantity=10, unit="kg", amount=7500),
        dict(date=yesterday.isoformat(), category="uber_delivery", item="Rider payouts", quantity=1, unit="pcs", amount=650),
        dict(date=today.isoformat(), category="utilities", item="Electricity bill", quantity=1, unit="pcs", amount=2200),
        dict(date=today.isoformat(), category="consumables", item="Food boxes", quantity=200, unit="pcs", amount=1800),
    ]
    for expense in expenses:
        service.add_expense(session, expense)

    for entry in (
        dict(date=yesterday.isoformat(), amount=12500, source="online", notes="Foodpanda"),
        dict(date=today.isoformat(), amount=6400, source="cash"),
    ):
        service.add_revenue(session, entry)

    service.add_stock_item(
        session,
        dict(name="Beef", category="meat", current_quantity=4, unit="kg", min_level=5, last_purchase_price=750),
    )
    service.add_stock_item(
        session,
        dict(name="Onion", category="vegetable", current_quantity=20, unit="kg", min_level=5, last_purchase_price=60),
    )
    service.add_consumable(
        session,
        dict(name="Food boxes", category="packaging", current_quantity=150, unit="pcs", min_level=50),
    )
    print("Seed data created.")


if __name__ == "__main__":
    main()

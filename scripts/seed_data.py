import argparse
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select

from stockwatch.core.logging import setup_logging
from stockwatch.database import SessionLocal, init_db
from stockwatch.models.alert import Alert
from stockwatch.models.product import Product
from stockwatch.models.supplier import Supplier


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample suppliers and products.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    init_db()

    now = datetime.now(timezone.utc)
    db = SessionLocal()
    try:
        if args.reset:
            db.execute(delete(Alert))
            db.execute(delete(Product))
            db.execute(delete(Supplier))
            db.commit()

        has_supplier = db.execute(select(Supplier.id).limit(1)).first()
        if has_supplier:
            print("Seed skipped: suppliers already exist.")
            return

        medline = Supplier(name="Medline Wholesale", email="orders@medline.example", phone="+15550100001")
        apex = Supplier(name="Apex Pharma", email="supply@apex.example")
        northwind = Supplier(name="Northwind Distributors", phone="+15550100003")
        db.add_all([medline, apex, northwind])
        db.flush()

        db.add_all(
            [
                Product(
                    name="Amoxicillin 500mg",
                    sku="AMX-500",
                    quantity=120,
                    unit="boxes",
                    reorder_level=40,
                    location="Main Pharmacy",
                    expires_at=now + timedelta(days=10),
                    supplier_id=medline.id,
                ),
                Product(
                    name="Saline 0.9% 1L",
                    sku="SAL-1000",
                    quantity=8,
                    unit="bags",
                    reorder_level=25,
                    location="Ward B",
                    expires_at=now + timedelta(days=45),
                    supplier_id=apex.id,
                ),
                Product(
                    name="Insulin Glargine",
                    sku="INS-100",
                    quantity=0,
                    unit="vials",
                    reorder_level=10,
                    location="Cold Store",
                    expires_at=now + timedelta(days=95),
                    supplier_id=northwind.id,
                ),
                Product(
                    name="Nitrile Gloves M",
                    sku="GLV-M",
                    quantity=300,
                    unit="boxes",
                    reorder_level=50,
                    location="Central Store",
                ),
            ]
        )
        db.commit()
        print("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    main()

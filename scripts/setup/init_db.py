"""
Initialize database — creates all tables, optionally seeds sample RCs.
Run once before first launch, or after adding new models.
Usage:
    python scripts/setup/init_db.py
    python scripts/setup/init_db.py --seed     # also insert two sample RCs if the table is empty
"""

import sys
import os
import argparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import asyncio
from app.database import create_tables, engine, SessionLocal
from app.config import settings
from app.repositories.ownership_history_repository import OwnershipHistoryRepository
from app.repositories.rc_repository import RcRepository
from app.schemas.rc import RcIn
from app.services.notification_service import EmailNotifier
from app.services.rc_service import RcService
from sqlalchemy import text

SAMPLE_RCS = [
    {
        "rcNumber": "KA01AB1234",
        "owner": {"name": "Rohit Kumar", "phone": "9876543210", "email": "rohit@example.com",
                  "address": "Bengaluru, Karnataka", "aadhaarLast4": "1234"},
        "vehicleInfo": {"type": "Car", "make": "Maruti", "model": "Swift", "variant": "VXI",
                        "fuelType": "Petrol", "color": "Red", "manufactureYear": 2021},
        "chassisNumber": "CHS123456789",
        "engineNumber": "ENG987654321",
        "registrationState": "KA",
        "registrationInfo": {"registrationDate": "2021-01-05", "validTill": "2036-01-04", "active": True},
        "insurance": {"provider": "ABC Insurance", "policyNumber": "POL123456", "validTill": "2025-12-31"},
        "puc": {"certificateNumber": "PUC987654", "validTill": "2025-12-31"},
        "stolen": False,
        "suspicious": False,
    },
    {
        "rcNumber": "DL02CD5678",
        "owner": {"name": "Priya Singh", "phone": "9123456789", "email": "priya@example.com",
                  "address": "Delhi, India", "aadhaarLast4": "5678"},
        "vehicleInfo": {"type": "Car", "make": "Hyundai", "model": "Creta", "variant": "ZXI",
                        "fuelType": "Diesel", "color": "Blue", "manufactureYear": 2023},
        "chassisNumber": "CHS987654321",
        "engineNumber": "ENG123456789",
        "registrationState": "DL",
        "registrationInfo": {"registrationDate": "2023-03-20", "validTill": "2038-03-20", "active": True},
        "insurance": {"provider": "XYZ Insurance", "policyNumber": "POL987654", "validTill": "2026-03-20"},
        "puc": {"certificateNumber": "PUC123456", "validTill": "2025-09-20"},
        "stolen": False,
        "suspicious": False,
    },
]


def seed():
    db = SessionLocal()
    notifier = EmailNotifier()
    try:
        service = RcService(RcRepository(db), OwnershipHistoryRepository(db), notifier)
        if service.get_all():
            print("ℹ️  rc_records not empty — skipping seed")
            return
        for payload in SAMPLE_RCS:
            rc = asyncio.run(service.create(RcIn.model_validate(payload)))
            print(f"   ✓ {rc.rc_number} ({rc.owner_name})")
    finally:
        db.close()
        notifier.shutdown()


def main():
    parser = argparse.ArgumentParser(description="Create RC registry tables")
    parser.add_argument("--seed", action="store_true", help="Insert sample RCs into an empty table")
    args = parser.parse_args()

    print("🗄️  RC Registry DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  docker-compose up -d db")
        print("  # or: sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    print("✅ Tables ready: rc_records, ownership_history")

    if args.seed:
        print("\n🌱 Seeding sample RCs...")
        seed()

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn app.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()

"""
Initialize database: creates all tables and seeds spots + barriers.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--spots 5]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from parking_gate.database import create_tables, engine, SessionLocal
from parking_gate.config import settings
from parking_gate.services.seed_service import seed_parking_lot
from sqlalchemy import inspect, text


def main():
    parser = argparse.ArgumentParser(description="Create tables and seed the parking lot")
    parser.add_argument("--spots", type=int, default=settings.PARKING_SPOT_COUNT)
    args = parser.parse_args()

    print("🗄️  Parking Gate DB Initialization")
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
    tables = sorted(inspect(engine).get_table_names())
    print(f"✅ Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    print(f"\n🅿️  Seeding {args.spots} spots + barriers...")
    db = SessionLocal()
    try:
        result = seed_parking_lot(db, args.spots)
    finally:
        db.close()
    print(f"✅ {result['spots_created']} spot(s), {result['barriers_created']} barrier(s) created")

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn parking_gate.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()

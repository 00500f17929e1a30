#!/usr/bin/env python3
"""
Seed script to create a demo restaurant, its users and a few reservations
"""

import asyncio
from datetime import timedelta

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select

    from reservo.database import SessionLocal, init_db
    from reservo.booking.clock import Clock
    from reservo.models.tenant import Tenant
    from reservo.models.user import User, UserRole
    from reservo.models.reservation import Reservation, ReservationStatus

    # Create tables
    await init_db()

    async with SessionLocal() as db:
        # Check if demo tenant already exists
        result = await db.execute(
            select(Tenant).where(Tenant.name == "Taverna Demo")
        )
        existing = result.scalar_one_or_none()

        if existing:
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo tenant...")

        tenant = Tenant(
            name="Taverna Demo",
            max_auto_confirm_people=6,
            same_day_cutoff="11:00",
        )
        db.add(tenant)
        await db.flush()

        print(f"Created tenant: {tenant.name} (ID: {tenant.id})")

        users = [
            User(
                email="admin@reservo.local",
                hashed_password=pwd_context.hash("admin123"),
                full_name="Platform Admin",
                role=UserRole.SUPER_ADMIN,
            ),
            User(
                tenant_id=tenant.id,
                email="owner@taverna.local",
                hashed_password=pwd_context.hash("owner123"),
                full_name="Taverna Owner",
                role=UserRole.RESTAURANT_ADMIN,
            ),
            User(
                tenant_id=tenant.id,
                email="host@taverna.local",
                hashed_password=pwd_context.hash("host123"),
                full_name="Front Desk",
                role=UserRole.STAFF_VIEWER,
            ),
        ]
        db.add_all(users)

        today = Clock().today()
        reservations = [
            ("Arben Hoxha", "+355691111111", today + timedelta(days=1), "19:30", 4, ReservationStatus.CONFIRMED),
            ("Elira Dema", "+355692222222", today + timedelta(days=2), "20:00", 10, ReservationStatus.PENDING),
            ("Marco Rossi", "+393331234567", today + timedelta(days=7), "13:00", 2, ReservationStatus.CONFIRMED),
        ]
        for name, phone, service_date, service_time, party_size, status in reservations:
            db.add(
                Reservation(
                    tenant_id=tenant.id,
                    customer_name=name,
                    phone=phone,
                    service_date=service_date,
                    service_time=service_time,
                    party_size=party_size,
                    channel="phone",
                    status=status,
                    decision_reason="seed",
                )
            )

        await db.commit()

        print(f"""
Demo data created successfully!

Tenant: Taverna Demo
  ID: {tenant.id}
  Auto-confirm up to 6 guests, same-day cutoff 11:00

Users:
  Super Admin:
    Email: admin@reservo.local
    Password: admin123

  Restaurant Admin (owner):
    Email: owner@taverna.local
    Password: owner123

  Staff Viewer:
    Email: host@taverna.local
    Password: host123

Reservations: {len(reservations)} created
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())

#!/usr/bin/env python3
"""
Seed script to create demo hotel staff, room types and rooms
"""

import asyncio

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ROOM_TYPES = [
    # name, base price, discount %, max adults, max children, room numbers
    ("Standard", 80.0, 0.0, 2, 1, ["101", "102", "103", "104"]),
    ("Deluxe", 100.0, 10.0, 2, 2, ["201", "202", "203"]),
    ("Suite", 250.0, 0.0, 4, 2, ["301", "302"]),
]

STAFF = [
    ("admin@hotel.example", "Hotel Admin", "admin"),
    ("manager@hotel.example", "Front Office Manager", "manager"),
    ("desk@hotel.example", "Front Desk", "receptionist"),
    ("housekeeping@hotel.example", "Housekeeping Lead", "housekeeping"),
    ("guest@hotel.example", "Demo Guest", "guest"),
]

DEMO_PASSWORD = "demo12345"


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select
    from app.database import SessionLocal, engine, Base
    from app.models.room import Room, RoomType
    from app.models.user import User, UserRole
    import app.models  # noqa: F401  register all tables

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        result = await db.execute(select(RoomType).where(RoomType.name == "Deluxe"))
        if result.scalar_one_or_none():
            print("Demo data already exists. Skipping...")
            return

        print("Creating staff and guest accounts...")
        for email, full_name, role in STAFF:
            db.add(User(
                email=email,
                hashed_password=pwd_context.hash(DEMO_PASSWORD),
                full_name=full_name,
                role=UserRole(role),
                is_active=True,
            ))

        print("Creating room types and rooms...")
        for name, base_price, discount, max_adults, max_children, numbers in ROOM_TYPES:
            room_type = RoomType(
                name=name,
                base_price=base_price,
                discount=discount,
                max_adults=max_adults,
                max_children=max_children,
            )
            db.add(room_type)
            await db.flush()

            for number in numbers:
                db.add(Room(
                    room_number=number,
                    room_type_id=room_type.id,
                    floor=int(number[0]),
                ))
            print(f"  {name}: {len(numbers)} rooms")

        await db.commit()

        print(f"""
Demo data created successfully!

Accounts (password: {DEMO_PASSWORD}):
""" + "\n".join(f"  {email:<30} {role}" for email, _, role in STAFF))


if __name__ == "__main__":
    asyncio.run(seed_demo_data())

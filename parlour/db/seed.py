"""
Seed script: dashboard users and sample employees.

Run with DATABASE_URL set:
  python -m parlour.db.seed

Creates (after clearing users, tasks and employees; attendance history is cleared too):
- users: superadmin@parlour.com (super_admin), admin@parlour.com (admin), password SEED_PASSWORD
- employees: four sample staff members
"""
import asyncio
from datetime import date

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from parlour.auth.models import User
from parlour.auth.security import hash_password
from parlour.core.config import settings
from parlour.core.enums import UserRole
from parlour.core.models import AttendanceEvent, Employee, Task
from parlour.db.session import AsyncSessionLocal, init_db

SEED_USERS = [
    ("superadmin@parlour.com", "Super Administrator", UserRole.SUPER_ADMIN),
    ("admin@parlour.com", "Administrator", UserRole.ADMIN),
]

SEED_EMPLOYEES = [
    ("Alice Johnson", "alice@parlour.com", "+1234567890", "Hair Stylist", "Hair Care", date(2023, 1, 15)),
    ("Bob Smith", "bob@parlour.com", "+1234567891", "Nail Technician", "Nail Care", date(2023, 2, 20)),
    ("Carol Williams", "carol@parlour.com", "+1234567892", "Esthetician", "Skin Care", date(2023, 3, 10)),
    ("David Brown", "david@parlour.com", "+1234567893", "Massage Therapist", "Wellness", date(2023, 4, 5)),
]


async def seed(db: AsyncSession) -> None:
    # Children first: tasks and ledger rows reference users and employees
    await db.execute(delete(Task))
    await db.execute(delete(AttendanceEvent))
    await db.execute(delete(Employee))
    await db.execute(delete(User))
    print("Cleared existing data.")

    for email, name, role in SEED_USERS:
        db.add(
            User(
                email=email,
                name=name,
                password_hash=hash_password(settings.seed_password),
                role=role.value,
            )
        )
    print("Created users.")

    for name, email, phone, position, department, join_date in SEED_EMPLOYEES:
        db.add(
            Employee(
                name=name,
                email=email,
                phone=phone,
                position=position,
                department=department,
                join_date=join_date,
                is_active=True,
            )
        )
    await db.commit()
    print("Created sample employees.")

    for email, _, role in SEED_USERS:
        print(f"{role.value} login: {email}")


async def main() -> None:
    await init_db()
    async with AsyncSessionLocal() as db:
        try:
            await seed(db)
        except Exception as e:
            await db.rollback()
            print("Error:", e)
            raise


if __name__ == "__main__":
    asyncio.run(main())

"""
Bootstrap script for the first admin.

Every user starts as a customer on first login, so the first admin has to be
granted out of band. Run after the database is reachable:

    python -m backend.seed_users admin@example.com [--name "Ops Admin"]
"""

import argparse
import asyncio

from backend.tracknship.db.session import AsyncSessionLocal, init_db, dispose_engine
from backend.tracknship.models.enums import UserRole
from backend.tracknship.models.booking import Booking  # noqa: F401
from backend.tracknship.models.payment import Payment  # noqa: F401
from backend.tracknship.models.review import Review  # noqa: F401
from backend.tracknship.services.users import upsert_user, change_role


async def seed_admin(email: str, name: str = None) -> None:
    """Create ``email`` if needed and grant it the admin role."""
    await init_db()
    try:
        async with AsyncSessionLocal() as db:
            print("🌱 Starting admin seeding...")

            user, created = await upsert_user(db, email, name=name)
            if user.role == UserRole.ADMIN:
                print(f"ℹ️  {email} is already an admin, skipping seeding")
                return

            await change_role(db, user.id, UserRole.ADMIN)
            state = "Created" if created else "Promoted"
            print(f"✅ {state} ADMIN user {email}")
    finally:
        await dispose_engine()


def main():
    parser = argparse.ArgumentParser(description="Grant the admin role to a user")
    parser.add_argument("email")
    parser.add_argument("--name", default=None)
    args = parser.parse_args()
    asyncio.run(seed_admin(args.email, args.name))


if __name__ == "__main__":
    main()

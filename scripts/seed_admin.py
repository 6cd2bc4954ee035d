#!/usr/bin/env python3
"""Seed script to bootstrap a superadmin, or promote an existing account."""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import settings
from app.database import Database
from app.models.user_profile import UserProfile
from app.schemas.user import ProfileStatus, Role
from app.services import identity_service, user_profile_service


async def promote(db, uid: str, email: str, role: str) -> None:
    """Write the role to both the profile store and the identity claims."""
    profile = await user_profile_service.get_profile_by_uid(db, uid)
    if profile is None:
        profile = UserProfile(uid=uid, email=email, fb_name="N/A")
        db.add(profile)
    profile.role = role
    profile.status = ProfileStatus.approved.value
    await identity_service.set_custom_claims(
        db,
        uid,
        {"role": role, "status": ProfileStatus.approved.value},
        commit=False,
    )
    await db.commit()


async def create_superadmin(
    database: Database,
    email: str = "admin@example.com",
    password: str = "admin123",
) -> None:
    """Create a superadmin account and profile if the email is not taken."""
    session_maker = await database.connect()
    async with session_maker() as db:
        account = await identity_service.get_account_by_email(db, email)
        if account:
            if (account.custom_claims or {}).get("role") == Role.superadmin.value:
                print(f"Superadmin already exists: {email}")
                return
            await promote(db, account.uid, account.email, Role.superadmin.value)
            print(f"Upgraded existing account to superadmin: {email}")
            return

        account = await identity_service.create_account(db, email, password)
        await promote(db, account.uid, account.email, Role.superadmin.value)
        print(f"Created superadmin: {email} (uid={account.uid})")
        print(f"Password: {password}")
        print("\nYou can now login with these credentials.")


async def set_role(database: Database, email: str, role: str) -> None:
    session_maker = await database.connect()
    async with session_maker() as db:
        account = await identity_service.get_account_by_email(db, email)
        if not account:
            print(f"Account not found: {email}")
            return
        await promote(db, account.uid, account.email, role)
        print(f"Set role {role} for {email}")


async def run(args) -> None:
    database = Database(settings.DATABASE_URL)
    try:
        if args.make_admin:
            await set_role(database, args.make_admin, Role.admin.value)
        else:
            await create_superadmin(database, args.email, args.password)
    finally:
        await database.dispose()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Superadmin seeder")
    parser.add_argument(
        "--email",
        default="admin@example.com",
        help="Superadmin email (default: admin@example.com)",
    )
    parser.add_argument(
        "--password",
        default="admin123",
        help="Superadmin password (default: admin123)",
    )
    parser.add_argument(
        "--make-admin",
        metavar="EMAIL",
        help="Give an existing account the admin role by email",
    )

    args = parser.parse_args()
    asyncio.run(run(args))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Seed script to create an admin user."""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from app.core.security import hash_password
from app.database import async_session_maker
from app.models.user import User


async def create_admin_user(
    email: str = "admin@heartline.app",
    password: str = "admin12345",
    phone: str | None = None,
) -> None:
    """Create an admin user, or promote the existing account with that email."""
    async with async_session_maker() as db:
        result = await db.execute(select(User).where(User.email == email.lower()))
        existing_user = result.scalar_one_or_none()

        if existing_user:
            if existing_user.is_admin:
                print(f"Admin user already exists: {email}")
            else:
                existing_user.is_admin = True
                await db.commit()
                print(f"Upgraded existing user to admin: {email}")
            return

        admin = User(
            email=email.lower(),
            password_hash=hash_password(password),
            phone=phone,
            is_admin=True,
            email_verified=True,
            status="active",
        )
        db.add(admin)
        await db.commit()
        print(f"Created admin user: {email}")
        print(f"Password: {password}")


def main():
    parser = argparse.ArgumentParser(description="Admin user seeder")
    parser.add_argument("--email", default="admin@heartline.app", help="Admin email")
    parser.add_argument("--password", default="admin12345", help="Admin password")
    parser.add_argument("--phone", default=None, help="Admin phone number (optional)")
    args = parser.parse_args()

    asyncio.run(create_admin_user(args.email, args.password, args.phone))


if __name__ == "__main__":
    main()

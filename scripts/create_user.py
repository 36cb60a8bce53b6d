#!/usr/bin/env python3
"""
Create a user account from the command line
Admins cannot self-register through the API, so the first admin comes from here.

Usage:
    python scripts/create_user.py admin@example.com 'S3cret-pass' --first-name Site --last-name Admin
    python scripts/create_user.py hr@acme.com 'S3cret-pass' --role EMPLOYER
"""

import sys
import asyncio
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from app.core.security import get_password_hash
from app.db.repositories import ProfileStore, UserStore
from app.db.session import AsyncSessionLocal
from app.utils.constants import USER_ROLES, Role


async def create_user(email: str, password: str, role: Role, first_name: str, last_name: str) -> int:
    async with AsyncSessionLocal() as db:
        users = UserStore(db)
        if await users.find_by_email(email) is not None:
            print(f"User {email} already exists")
            return 1

        user = await users.create(email=email, password_hash=get_password_hash(password), role=role)
        await ProfileStore(db).create(user.id, first_name, last_name)
        await db.commit()
        print(f"Created {role.value} {email} ({user.id})")
        return 0


def main():
    parser = argparse.ArgumentParser(description="Create a job portal user")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--role", choices=USER_ROLES, default=Role.ADMIN.value)
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    args = parser.parse_args()

    if len(args.password) < 8:
        parser.error("password must be at least 8 characters")

    sys.exit(
        asyncio.run(
            create_user(args.email, args.password, Role(args.role), args.first_name, args.last_name)
        )
    )


if __name__ == "__main__":
    main()

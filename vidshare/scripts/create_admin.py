#!/usr/bin/env python3
"""
Grant admin rights to a user, creating the user when it does not exist yet.

Usage: python -m vidshare.scripts.create_admin <email>
"""
import argparse
import asyncio
import sys

from dotenv import load_dotenv
from sqlalchemy import select

from vidshare.web.app.db import AsyncSessionLocal
from vidshare.web.app.models import User


async def promote(email: str) -> User:
    email = email.strip().lower()
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is None:
            user = User(email=email, display_label=email.split("@")[0], is_admin=True)
            session.add(user)
            print(f"➕ Created user {email}")
        else:
            user.is_admin = True

        await session.commit()
        await session.refresh(user)
        return user


def main(argv=None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Grant admin rights to a user")
    parser.add_argument("email", help="e.g. admin@example.com")
    args = parser.parse_args(argv)

    user = asyncio.run(promote(args.email))
    print("\n✅ SUCCESS! User is now an admin:\n")
    print(f"   Email: {user.email}")
    print(f"   Admin: {user.is_admin}")
    print(f"   Created: {user.created_at}")
    print("\nAdmin rights apply to the next request; existing tokens need no refresh.\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())

# scripts/manage_admins.py

import argparse
import asyncio

from sqlalchemy.exc import IntegrityError

from foodfantasy.config import settings
from foodfantasy.crud import admin as admin_crud
from foodfantasy.db import async_session, create_db_and_tables


async def list_admins():
    async with async_session() as session:
        admins = await admin_crud.get_admins(session)
        if not admins:
            print("⚠️  No admins found.")
            return
        for admin in admins:
            role = "super admin" if admin.is_super_admin else "admin"
            print(f"👤 {admin.email} ({role}), added by {admin.created_by} on {admin.created_at:%Y-%m-%d}")


async def add_admin(email, super_admin=False):
    async with async_session() as session:
        try:
            admin = await admin_crud.create_admin(session, email, created_by="cli", is_super_admin=super_admin)
        except IntegrityError:
            print(f"⚠️  {email} is already an admin. Skipping.")
            return
        print(f"✅ Added: {admin.email}{' (super admin)' if admin.is_super_admin else ''}")


async def remove_admin(email):
    async with async_session() as session:
        admin = await admin_crud.get_admin(session, email)
        if not admin:
            print(f"⚠️  No admin found with email: {email}")
            return
        await admin_crud.delete_admin(session, admin)
        print(f"🗑️  Removed admin: {admin.email}")


async def seed_super_admin():
    if not settings.super_admin_email:
        print("❌ SUPER_ADMIN_EMAIL is not set.")
        return
    await create_db_and_tables()
    await add_admin(settings.super_admin_email, super_admin=True)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manage Food Fantasy admins")
    parser.add_argument("--list", action="store_true", help="List admins")
    parser.add_argument("--add", type=str, metavar="EMAIL", help="Add an admin")
    parser.add_argument("--super", action="store_true", help="With --add, make the new admin a super admin")
    parser.add_argument("--remove", type=str, metavar="EMAIL", help="Remove an admin")
    parser.add_argument("--seed-super", action="store_true", help="Create SUPER_ADMIN_EMAIL as super admin")

    args = parser.parse_args()

    if args.list:
        asyncio.run(list_admins())
    elif args.add:
        asyncio.run(add_admin(args.add, super_admin=args.super))
    elif args.remove:
        asyncio.run(remove_admin(args.remove))
    elif args.seed_super:
        asyncio.run(seed_super_admin())
    else:
        print("❗ Usage:")
        print("  python -m scripts.manage_admins --list")
        print("  python -m scripts.manage_admins --add owner@example.com --super")
        print("  python -m scripts.manage_admins --remove cashier@example.com")
        print("  python -m scripts.manage_admins --seed-super")

"""
Initialise the database and print the admin credential hash.

The archive deletion endpoint checks a single username/password pair whose
bcrypt hash lives in SECURITY__ADMIN_PASSWORD_HASH.

    python init_admin.py --password 's3cret'
"""
import argparse
import asyncio
import getpass

from adr_checklist.core.config import get_settings
from adr_checklist.core.crypto import hash_password
from adr_checklist.infrastructure.database.session import init_db


async def initialise(password: str) -> None:
    settings = get_settings()
    await init_db()

    password_hash = hash_password(password)

    print("=" * 50)
    print(f"Database ready: {settings.database_url}")
    print(f"Admin username: {settings.security.admin_username}")
    print("Add the following line to .env:")
    print(f"SECURITY__ADMIN_PASSWORD_HASH='{password_hash}'")
    print("=" * 50)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create tables and hash the admin password")
    parser.add_argument("--password", help="plain text admin password (prompted when omitted)")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Admin password: ")
    if not password:
        raise SystemExit("password must not be empty")
    asyncio.run(initialise(password))


if __name__ == "__main__":
    main()

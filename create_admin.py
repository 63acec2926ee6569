"""
Script to create (or promote) an admin account for the dashboard.

Admins are the only accounts in this system, so there is no sign-up endpoint;
run this once per recruiter:

    python create_admin.py recruiter@example.com --name "Jamie Recruiter"

The password is prompted for unless --password is given.
"""

import argparse
import getpass
import os
import sys

# Add project root to Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from recruiting.core.config import settings
from recruiting.core.database import build_engine, build_session_factory, init_db
from recruiting.core.security import get_password_hash
from recruiting.models.admin_user import AdminUser


def create_admin(email: str, password: str, full_name: str = None) -> AdminUser:
    """Create an admin, or reset the password and re-enable an existing account."""
    engine = build_engine(settings.DATABASE_URL)
    init_db(engine, create_tables=settings.AUTO_CREATE_TABLES)
    db = build_session_factory(engine)()

    try:
        user = db.query(AdminUser).filter(AdminUser.email == email).first()
        if user:
            print(f"Updating existing account {email}")
            user.hashed_password = get_password_hash(password)
            user.is_active = True
            user.is_admin = True
            if full_name:
                user.full_name = full_name
        else:
            print(f"Creating admin account {email}")
            user = AdminUser(
                email=email,
                hashed_password=get_password_hash(password),
                full_name=full_name,
                is_active=True,
                is_admin=True,
            )
            db.add(user)

        db.commit()
        db.refresh(user)
        return user
    finally:
        db.close()
        engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Create or promote a dashboard admin")
    parser.add_argument("email")
    parser.add_argument("--name", dest="full_name", default=None)
    parser.add_argument("--password", default=None)
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        print("Password must be at least 8 characters")
        sys.exit(1)

    user = create_admin(args.email, password, args.full_name)
    print(f"Admin ready: {user.email} (id: {user.id})")


if __name__ == "__main__":
    main()

"""Script to create a voter (or admin) and print a development bearer token."""
import argparse
import sys

from app.db.session import SessionLocal
from app.services.auth import create_access_token, create_user, get_user_by_email


def main():
    parser = argparse.ArgumentParser(description="Create a voting user")
    parser.add_argument("--email", required=True, help="Email identifying the user")
    parser.add_argument("--admin", action="store_true", help="Bypass the vote quota")
    parser.add_argument("--token", action="store_true", help="Print a development bearer token")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        existing = get_user_by_email(db, args.email)
        if existing:
            print(f"User '{args.email}' already exists.")
            sys.exit(1)

        user = create_user(db, args.email, is_admin=args.admin)
        role = "admin" if user.is_admin else "voter"
        print(f"Created {role} '{user.email}' with ID {user.id}")
        if args.token:
            print(create_access_token(user.email))
    finally:
        db.close()


if __name__ == "__main__":
    main()

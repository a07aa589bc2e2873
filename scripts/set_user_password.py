"""Utility to create or update an account's password in the SQL store for local development."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure the project root is on sys.path so ``tutalink`` can be imported when the script is executed directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tutalink import create_app
from tutalink.auth import hash_password
from tutalink.domain import Role, User
from tutalink.storage import get_storage


def set_password(username: str, email: str, password: str, role: str = "learner") -> None:
    app = create_app({"STORAGE_BACKEND": "sql"})

    with app.app_context():
        storage = get_storage()
        user = storage.find_user_by_username(username)
        if user is None:
            user = storage.add_user(
                User(username=username, email=email, password=hash_password(password), role=Role(role))
            )
            print(f"Created new {role} user: {username}")
        else:
            # Update existing user's role if different
            if user.role is not Role(role):
                print(f"Updating user role from '{user.role.value}' to '{role}'")
                user.role = Role(role)
            user.password = hash_password(password)
            storage.save_user(user)

        print(f"Password for {role} user '{username}' has been set successfully.")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Set a user password for local testing.")
    parser.add_argument("username", help="Username (case-insensitive)")
    parser.add_argument("email", help="Email address, used when the account is created")
    parser.add_argument("password", help="Plain-text password to hash and store")
    parser.add_argument(
        "--role",
        choices=[r.value for r in Role],
        default="learner",
        help="User role (default: learner)"
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    set_password(args.username, args.email, args.password, args.role)


if __name__ == "__main__":
    main()

"""Create the first admin account.

Usage: python scripts/create_admin_user.py admin@example.com Dana Levi [--gender female]
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from survey_tracker.core.exceptions import ValidationError
from survey_tracker.database.init_db import init_db
from survey_tracker.domain.enums import UserRole
from survey_tracker.services.user_service import UserService


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create an admin user.")
    parser.add_argument("email")
    parser.add_argument("first_name")
    parser.add_argument("last_name")
    parser.add_argument("--gender", default="male", choices=["male", "female"])
    parser.add_argument("--password", default=None, help="Generated when omitted.")
    args = parser.parse_args(argv)

    init_db()
    with UserService() as service:
        try:
            user, temp_password = service.create_user(
                None,
                email=args.email,
                first_name=args.first_name,
                last_name=args.last_name,
                role=UserRole.ADMIN.value,
                gender=args.gender,
                password=args.password,
            )
        except ValidationError as exc:
            print(f"Could not create admin: {exc}")
            return 1

    print(f"Created admin {user.email} (id={user.id}).")
    if temp_password:
        print(f"Temporary password: {temp_password}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

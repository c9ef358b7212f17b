from __future__ import annotations

import argparse
import getpass

from sqlmodel import Session

from app.db.init_db import init_db
from app.db.session import engine
from app.models.enums import UserRole
from app.services.issue_seed import ensure_user


def main() -> None:
    parser = argparse.ArgumentParser(description='Create an admin account or promote an existing one.')
    parser.add_argument('email', help='Account email')
    parser.add_argument('--username', help='Username for a new account (defaults to the email local part)')
    parser.add_argument('--password', help='Password to set; prompted for when omitted')
    parser.add_argument('--keep-password', action='store_true', help='Leave an existing password unchanged')
    args = parser.parse_args()

    password = None
    if not args.keep_password:
        password = args.password or getpass.getpass('Password: ')

    init_db()
    with Session(engine) as session:
        user = ensure_user(
            session,
            args.email,
            args.username or args.email.split('@')[0],
            role=UserRole.ADMIN,
            password=password,
        )
    print(f"admin ready: id={user.id} email={user.email}")


if __name__ == '__main__':
    main()

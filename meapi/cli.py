"""
Me-API command line.

Commands:
    init-db         create missing tables
    seed            wipe the database and load the sample profile
    hash-password   print a bcrypt hash for ADMIN_PASSWORD_HASH
"""

import argparse
import getpass
import sys

from dotenv import load_dotenv

from .db import db
from .logging import configure_logging
from .security.passwords import hash_password
from .seed import seed_database, table_counts

load_dotenv()


def _init_database(database_url: str | None) -> None:
    db.initialize(database_url)
    db.create_all_tables()


def cmd_init_db(args: argparse.Namespace) -> int:
    _init_database(args.database_url)
    print("Tables created.")
    return 0


def cmd_seed(args: argparse.Namespace) -> int:
    _init_database(args.database_url)
    with db.session() as session:
        profile = seed_database(session)
        print(f"Profile created with ID: {profile.id}")
        counts = table_counts(session)

    print("\nVerification:")
    print(f"Profiles: {counts['profiles']}")
    print(f"Skills: {counts['skills']}")
    print(f"Projects: {counts['projects']}")
    print(f"Work Experience: {counts['work_experience']}")
    return 0


def cmd_hash_password(args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("Password must not be empty.", file=sys.stderr)
        return 1
    print(hash_password(password, rounds=args.rounds))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="me-api", description="Me-API maintenance commands")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init-db", help="Create missing tables")
    init_parser.set_defaults(func=cmd_init_db)

    seed_parser = subparsers.add_parser("seed", help="Replace all data with the sample profile")
    seed_parser.set_defaults(func=cmd_seed)

    hash_parser = subparsers.add_parser("hash-password", help="Print a bcrypt password hash")
    hash_parser.add_argument("--password", help="Password to hash (prompted when omitted)")
    hash_parser.add_argument("--rounds", type=int, default=10, help="bcrypt cost factor")
    hash_parser.set_defaults(func=cmd_hash_password)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    return args.func(args)


def seed_main() -> int:
    """Entry point of `me-api-seed`."""
    return main([*sys.argv[1:], "seed"])


if __name__ == "__main__":
    sys.exit(main())

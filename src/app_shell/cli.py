import argparse
import getpass
import logging
import sys
from datetime import UTC, datetime
from uuid import uuid4

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.deps import Settings
from src.app_shell.config import configure_logging
from src.domain.entities import User

logger = logging.getLogger("cli")


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(settings.db_path, settings.migrations_dir)

    if args.status:
        applied = migrator.applied_migrations()
        for name in migrator.available_migrations():
            print(f"[{'x' if name in applied else ' '}] {name}")
        return

    applied_now = migrator.run_migrations()
    print(f"Applied {len(applied_now)} migration(s) to {settings.db_path}.")


def handle_create_user(settings: Settings, args: argparse.Namespace) -> None:
    repo = SQLiteUserRepo(settings.db_path)
    if repo.get_by_email(args.email):
        logger.error("User %s already exists.", args.email)
        sys.exit(1)

    password = args.password or getpass.getpass("Password: ")
    if not password:
        logger.error("Password must not be empty.")
        sys.exit(1)

    now = datetime.now(UTC)
    user = User(
        id=uuid4(),
        email=args.email,
        display_name=args.name or args.email.split("@")[0],
        password_hash=JWTAuthAdapter(settings.secret_key).hash_password(password),
        status="active",
        created_at=now,
        updated_at=now,
    )
    repo.save(user)
    print(f"Created user {user.email} ({user.id}).")


def handle_serve(settings: Settings, args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run("src.api.main:app", host=args.host, port=args.port, log_level="info")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Postboard CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply pending database migrations")
    migrate_parser.add_argument(
        "--status", action="store_true", help="List migrations without applying them"
    )

    # create-user
    user_parser = subparsers.add_parser("create-user", help="Create a user who can log in")
    user_parser.add_argument("email", help="Login email")
    user_parser.add_argument("--name", help="Display name (defaults to the email local part)")
    user_parser.add_argument("--password", help="Password (prompted for when omitted)")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the API with uvicorn")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = Settings()
    configure_logging(settings.log_level)

    if args.command == "migrate":
        handle_migrate(settings, args)
    elif args.command == "create-user":
        handle_create_user(settings, args)
    elif args.command == "serve":
        handle_serve(settings, args)


if __name__ == "__main__":
    main()

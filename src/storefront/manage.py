"""Storefront management CLI.

Usage:
    python -m storefront.manage setup-db                 # Create all indexes
    python -m storefront.manage drop-db                  # Drop all collections
    python -m storefront.manage mark-abandoned --hours 24
    python -m storefront.manage create-admin --name Admin --email admin@example.com --password secret

``mark-abandoned`` is meant to be run periodically by an external scheduler
(cron, a Kubernetes CronJob).
"""

import argparse
import sys

from storefront.identity.user.account import AccountHandler, RegisterUser
from storefront.ordering.cart.abandonment import AbandonmentHandler, MarkAbandonedCarts
from storefront.shared.auth import Role
from storefront.shared.config import get_settings
from storefront.shared.db import Store, drop_db, setup_db
from storefront.shared.exceptions import StorefrontError
from storefront.shared.logging import configure_logging


def setup_database(store: Store) -> None:
    print(f"Creating indexes in {store.database_name}...")
    setup_db(store)
    print("Done.")


def drop_database(store: Store) -> None:
    print(f"Dropping collections in {store.database_name}...")
    drop_db(store)
    print("Done.")


def mark_abandoned(store: Store, hours: int) -> int:
    modified = AbandonmentHandler(store).mark_abandoned(MarkAbandonedCarts(idle_threshold_hours=hours))
    print(f"{modified} carts marked as abandoned")
    return modified


def create_admin(store: Store, name: str, email: str, password: str) -> None:
    settings = get_settings()
    command = RegisterUser(name=name, email=email, password=password)
    session = AccountHandler(store, settings).register(command, role=Role.ADMIN)
    print(f"Admin {session.user.email} created ({session.user.id})")


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create collection indexes")
    subparsers.add_parser("drop-db", help="Drop all collections")

    abandon_parser = subparsers.add_parser("mark-abandoned", help="Flag idle carts as abandoned")
    abandon_parser.add_argument(
        "--hours",
        type=int,
        default=settings.abandonment_threshold_hours,
        help="Idle threshold in hours (default: %(default)s)",
    )

    admin_parser = subparsers.add_parser("create-admin", help="Register an admin user")
    admin_parser.add_argument("--name", required=True)
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)

    args = parser.parse_args(argv)

    configure_logging(settings)
    store = Store.from_settings(settings)
    try:
        if args.command == "setup-db":
            setup_database(store)
        elif args.command == "drop-db":
            drop_database(store)
        elif args.command == "mark-abandoned":
            mark_abandoned(store, args.hours)
        elif args.command == "create-admin":
            create_admin(store, args.name, args.email, args.password)
    except StorefrontError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())

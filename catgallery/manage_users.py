"""Operator commands for the user and session tables.

Usage:
    python -m catgallery.manage_users list
    python -m catgallery.manage_users promote alice@example.com
    python -m catgallery.manage_users demote alice@example.com
    python -m catgallery.manage_users purge-sessions

The admin panel can only be reached by an admin, so the first admin has to
be promoted from here.
"""
import argparse
import sys

from catgallery.auth import users
from catgallery.core.context import AppContext, build_context
from catgallery.database import init_schema
from catgallery.models.user import Role


def list_users(context: AppContext) -> int:
    db = context.session_factory()
    try:
        for user in users.list_users(db):
            print(f"{user.id}\t{user.name}\t{user.email}\t{user.role}")
    finally:
        db.close()
    return 0


def change_role(context: AppContext, email: str, role: Role) -> int:
    db = context.session_factory()
    try:
        user = users.find_user_by_email(db, email)
        if user is None:
            print(f"No user with email {email}", file=sys.stderr)
            return 1
        users.set_role(db, user.id, role)
    finally:
        db.close()
    print(f"{email} is now {role.value}")
    return 0


def purge_sessions(context: AppContext) -> int:
    removed = context.sessions.purge_expired()
    print(f"Removed {removed} expired sessions")
    return 0


def main(argv: list[str] | None = None, context: AppContext | None = None) -> int:
    parser = argparse.ArgumentParser(prog="catgallery.manage_users")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="list all users")
    commands.add_parser("promote", help="give a user the admin role").add_argument("email")
    commands.add_parser("demote", help="give a user the user role").add_argument("email")
    commands.add_parser("purge-sessions", help="delete expired sessions")
    args = parser.parse_args(argv)

    context = context or build_context()
    init_schema(context.engine)

    if args.command == "list":
        return list_users(context)
    if args.command == "promote":
        return change_role(context, args.email, Role.ADMIN)
    if args.command == "demote":
        return change_role(context, args.email, Role.USER)
    return purge_sessions(context)


if __name__ == "__main__":
    sys.exit(main())

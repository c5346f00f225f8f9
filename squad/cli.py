"""
Command line entry point.

    squad serve [--host HOST] [--port PORT] [--reload]
    squad init-db
    squad create-user --email EMAIL --name NAME --password PASSWORD [--admin]
"""

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn
from fastapi import HTTPException
from pydantic import ValidationError

from squad.core.config import get_settings
from squad.core.database import Database
from squad.schemas.user_schemas import UserCreate
from squad.services import user_service

logger = logging.getLogger("squad.cli")


def _open_database() -> Database:
    database = Database(get_settings().database_url).open()
    database.create_all()
    return database


def cmd_serve(args: argparse.Namespace) -> int:
    uvicorn.run("squad.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def cmd_init_db(args: argparse.Namespace) -> int:
    database = _open_database()
    database.close()
    logger.info("Database schema is up to date")
    return 0


def cmd_create_user(args: argparse.Namespace) -> int:
    try:
        user_in = UserCreate(email=args.email, name=args.name, password=args.password, is_admin=args.admin)
    except ValidationError as exc:
        logger.error("Invalid user: %s", exc)
        return 2

    database = _open_database()
    try:
        with database.session() as db:
            user = user_service.create_user(db, user_in)
    except HTTPException as exc:
        logger.error("Could not create user: %s", exc.detail)
        return 1
    finally:
        database.close()

    print(f"Created {'admin' if user.is_admin else 'user'} {user.email} ({user.id})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="squad", description="Squad attendance tracker")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=cmd_serve)

    init_db = subparsers.add_parser("init-db", help="Create missing database tables")
    init_db.set_defaults(func=cmd_init_db)

    create_user = subparsers.add_parser("create-user", help="Create a player or admin account")
    create_user.add_argument("--email", required=True)
    create_user.add_argument("--name", required=True)
    create_user.add_argument("--password", required=True)
    create_user.add_argument("--admin", action="store_true", help="Grant admin rights")
    create_user.set_defaults(func=cmd_create_user)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

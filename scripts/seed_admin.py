#!/usr/bin/env python3
"""Create the admin account or reset its password."""
from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from pathlib import Path

from wallboard.auth.repository import AdminRepository, build_password_context
from wallboard.auth.service import AdminAuthError, AdminAuthService
from wallboard.auth.utils import JWTManager
from wallboard.config import AppConfig, load_config
from wallboard.database import build_engine, build_session_factory, init_schema

LOGGER = logging.getLogger("seed_admin")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument(
        "--password",
        default=None,
        help="New admin password (prompted for when omitted)",
    )
    return parser.parse_args(argv)


async def seed_admin(config: AppConfig, password: str) -> str:
    """Store ``password`` for the configured admin and return the username."""

    engine = build_engine(config.database)
    try:
        await init_schema(engine)
        session_factory = build_session_factory(engine)
        async with session_factory() as session:
            repository = AdminRepository(session, build_password_context(config.auth.password_schemes))
            service = AdminAuthService(config.auth, repository, JWTManager(config.auth.jwt))
            account = await service.set_admin_password(password)
            return account.username
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    args = parse_args(argv)
    config = load_config(args.config)

    password = args.password or getpass.getpass("Admin password: ")
    if not password.strip():
        print("Password must not be empty", file=sys.stderr)
        return 2

    try:
        username = asyncio.run(seed_admin(config, password))
    except AdminAuthError as exc:
        LOGGER.error("Could not store admin password: %s", exc)
        return 1
    print(f"Admin password stored for '{username}'")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

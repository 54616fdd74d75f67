#!/usr/bin/env python3
"""
Create an account from the command line.

Run from the project root:  python -m scripts.create_user
"""

from __future__ import annotations

import asyncio
from getpass import getpass

from auth.errors import AuthError
from database.session import engine, init_models
from main import build_gateway


async def _create(email: str, password: str) -> None:
    try:
        await init_models()
        identity = await build_gateway().signup(email, password)
    finally:
        await engine.dispose()
    print(f"OK -> {identity.email} ({identity.id})")


def main() -> None:
    email = input("Email: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        asyncio.run(_create(email, pw1))
    except AuthError as exc:
        raise SystemExit(f"{exc.kind.name}: {exc.public_message}")


if __name__ == "__main__":
    main()

"""CLI entrypoint.

Usage:
  python -m solecraft_cli.runner login --email a@b.com --password secret1
  python -m solecraft_cli.runner status
  python -m solecraft_cli.runner verify
  python -m solecraft_cli.runner logout

The credential is kept in a JSON file (SOLECRAFT_STORAGE_PATH, default
~/.solecraft/storage.json) namespaced by the API origin, so switching
SOLECRAFT_API_BASE_URL between local and production keeps separate sessions.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import httpx
from solecraft_auth.jwt import expires_at
from solecraft_auth.store import CredentialStore, FileStorage
from solecraft_gateway.auth_api import AuthApi
from solecraft_gateway.navigation import Navigator
from solecraft_gateway.session import SessionManager
from solecraft_shared.config import GatewaySettings, load_settings
from solecraft_shared.routes import FORGOT_PASSWORD_PATH, HOME_PATH, LOGIN_PATH, REGISTER_PATH

logger = logging.getLogger(__name__)


# Page each command acts from; a 401 on an auth page never redirects
START_PATHS = {
    "login": LOGIN_PATH,
    "register": REGISTER_PATH,
    "forgot-password": FORGOT_PASSWORD_PATH,
}


def build_session(
    settings: GatewaySettings,
    current_path: str = HOME_PATH,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SessionManager:
    """Wire a SessionManager backed by file storage for this settings' origin."""
    store = CredentialStore(FileStorage(settings.storage_path, namespace=settings.origin))
    navigator = Navigator(current_path=current_path, on_navigate=lambda path: print(f"-> {path}"))
    return SessionManager(store=store, navigator=navigator, settings=settings, transport=transport)


async def cmd_login(session: SessionManager, args: argparse.Namespace) -> int:
    result = await AuthApi(session).login(args.email, args.password)
    print(result.message)
    return 0 if result.success else 1


async def cmd_register(session: SessionManager, args: argparse.Namespace) -> int:
    result = await AuthApi(session).register(args.name, args.email, args.phone, args.password)
    print(result.message)
    return 0 if result.success else 1


async def cmd_forgot_password(session: SessionManager, args: argparse.Namespace) -> int:
    result = await AuthApi(session).forgot_password(args.email)
    print(result.message)
    if result.reset_token:
        print(f"Reset token: {result.reset_token}")
    return 0 if result.success else 1


async def cmd_logout(session: SessionManager, args: argparse.Namespace) -> int:
    session.logout()
    print("Logged out")
    return 0


async def cmd_status(session: SessionManager, args: argparse.Namespace) -> int:
    session.cleanup_invalid_tokens()
    if not session.is_authenticated():
        print("Not logged in")
        return 1

    claims = session.get_current_user() or {}
    profile = session.get_user_data() or {}
    who = profile.get("email") or claims.get("email") or claims.get("sub") or "unknown user"
    print(f"Logged in as {who}")
    expiry = expires_at(claims)
    if expiry is not None:
        print(f"Session expires {expiry.isoformat()}")
    return 0


async def cmd_verify(session: SessionManager, args: argparse.Namespace) -> int:
    valid = await session.verify_token()
    print("Session is valid" if valid else "Session is not valid")
    return 0 if valid else 1


COMMANDS = {
    "login": cmd_login,
    "register": cmd_register,
    "forgot-password": cmd_forgot_password,
    "logout": cmd_logout,
    "status": cmd_status,
    "verify": cmd_verify,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="solecraft", description="SoleCraft session tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_login = sub.add_parser("login", help="Log in with email and password")
    p_login.add_argument("--email", required=True)
    p_login.add_argument("--password", required=True)

    p_register = sub.add_parser("register", help="Create an account")
    p_register.add_argument("--name", required=True)
    p_register.add_argument("--email", required=True)
    p_register.add_argument("--phone", required=True)
    p_register.add_argument("--password", required=True)

    p_forgot = sub.add_parser("forgot-password", help="Send a password reset link")
    p_forgot.add_argument("--email", required=True)

    sub.add_parser("logout", help="Clear the stored session")
    sub.add_parser("status", help="Show the stored session")
    sub.add_parser("verify", help="Check the stored session with the backend")
    return parser


async def run(
    args: argparse.Namespace,
    settings: GatewaySettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    current_path = START_PATHS.get(args.command, HOME_PATH)
    async with build_session(settings, current_path, transport) as session:
        return await COMMANDS[args.command](session, args)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint: parse arguments, run the command and exit with its status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = load_settings()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    sys.exit(asyncio.run(run(args, settings)))


if __name__ == "__main__":
    main()

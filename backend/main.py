"""
FirstPrinciple auth inspector.

Command-line tools for the navigation core: decode a deep link the way
the apps do, or dry-run a resolution pass for a given session, user record
and location without touching Supabase.

Usage:
    python main.py decode "firstprinciplebiz://auth/callback?code=abc"
    python main.py resolve --role student --location /login
    python main.py resolve --no-session --location "/(tabs)" --platform mobile
"""

import argparse
import sys
from datetime import datetime, timezone
from typing import Optional

from rich.console import Console
from rich.table import Table

from modules.auth.models import Session
from modules.deeplinks.decoder import decode
from modules.deeplinks.models import DeepLinkIntent
from modules.navigation.models import Decision
from modules.navigation.resolver import resolve
from modules.navigation.routes import ROUTE_MAPS, RouteMap
from modules.users.models import UserRecord, UserRole
from shared.log_config import configure_logging

console = Console()

DRY_RUN_USER_ID = "00000000-0000-0000-0000-000000000000"


def build_session(
    signed_in: bool = True,
    confirmed: bool = True,
    signup_role: Optional[UserRole] = None,
) -> Optional[Session]:
    """Build the session a dry run resolves against."""
    if not signed_in:
        return None
    return Session(
        user_id=DRY_RUN_USER_ID,
        email="dry-run@example.com",
        email_confirmed_at=datetime.now(timezone.utc) if confirmed else None,
        user_metadata={"role": signup_role.value} if signup_role else {},
    )


def dry_run(
    session: Optional[Session],
    record: Optional[UserRecord],
    location: str,
    route_map: RouteMap,
    recovery_code: Optional[str] = None,
) -> tuple[Decision, Optional[str]]:
    """
    Resolve without side effects.

    A missing record for a session with a sign-up role is created in memory
    first, as a live pass would.

    Returns:
        The decision and the rendered redirect path (None to stay)
    """
    if session is not None and session.email_confirmed and record is None and session.role_hint:
        record = UserRecord(
            id=session.user_id,
            email=session.email,
            role=session.role_hint,
            profile_completed=False,
        )
    decision = resolve(session, record, route_map.locate(location), recovery_code=recovery_code)
    path = route_map.render(decision.destination) if decision.destination else None
    return decision, path


def print_intent(url: str, intent: DeepLinkIntent) -> None:
    table = Table(title=f"Deep link: {url}", show_header=False)
    table.add_row("kind", intent.kind.value)
    table.add_row("code", intent.code or "-")
    table.add_row("tokens", "yes" if intent.has_tokens else "no")
    table.add_row("type", intent.link_type or "-")
    table.add_row("error", intent.error or "-")
    console.print(table)


def print_decision(decision: Decision, path: Optional[str]) -> None:
    table = Table(title="Resolution", show_header=False)
    table.add_row("state", decision.state.value)
    table.add_row("sign out", "yes" if decision.sign_out else "no")
    table.add_row("navigate to", path or "[dim]stay[/dim]")
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect FirstPrinciple deep links and auth resolution"
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    commands = parser.add_subparsers(dest="command", required=True)

    decode_parser = commands.add_parser("decode", help="Decode a deep link URL")
    decode_parser.add_argument("url", help="URL handed to the app")

    resolve_parser = commands.add_parser("resolve", help="Dry-run a resolution pass")
    resolve_parser.add_argument(
        "--no-session",
        action="store_true",
        help="Resolve as signed out",
    )
    resolve_parser.add_argument(
        "--unconfirmed",
        action="store_true",
        help="Session email is not confirmed",
    )
    resolve_parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        help="Role of the existing user record (omit for no record)",
    )
    resolve_parser.add_argument(
        "--signup-role",
        choices=[role.value for role in UserRole],
        help="Role carried in the session's sign-up metadata",
    )
    resolve_parser.add_argument(
        "--completed",
        action="store_true",
        help="User record has profile_completed set",
    )
    resolve_parser.add_argument(
        "--recovery-code",
        help="Resolve while handling a password-recovery link with this code",
    )
    resolve_parser.add_argument(
        "--location", "-l",
        default="/",
        help="Current path (default: /)",
    )
    resolve_parser.add_argument(
        "--platform", "-p",
        choices=sorted(ROUTE_MAPS),
        default="web",
        help="Route table (default: web)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "decode":
        print_intent(args.url, decode(args.url))
        return 0

    if args.completed and not args.role:
        console.print("[red]Error:[/red] --completed requires --role")
        return 1

    session = build_session(
        signed_in=not args.no_session,
        confirmed=not args.unconfirmed,
        signup_role=UserRole(args.signup_role) if args.signup_role else None,
    )
    record = None
    if args.role and session is not None:
        record = UserRecord(
            id=session.user_id,
            email=session.email,
            role=UserRole(args.role),
            profile_completed=args.completed,
        )

    decision, path = dry_run(
        session,
        record,
        args.location,
        ROUTE_MAPS[args.platform],
        recovery_code=args.recovery_code,
    )
    print_decision(decision, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

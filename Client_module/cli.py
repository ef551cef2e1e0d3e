"""
Legislative assembly members client.

Usage:
    assembly list [--session-name NAME] [--session-date YYYY-MM-DD] [--search TEXT] [--category FIELD]
    assembly filters
    assembly show ID
    assembly browse
    assembly login [--email EMAIL]
    assembly whoami
    assembly logout
    assembly add [--name ...] [--image PATH] [--party-logo PATH]
    assembly edit ID [--name ...] [--image PATH] [--party-logo PATH]
    assembly delete ID [--yes]
"""
import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from .api_client import ApiError, AssemblyApiClient
from .auth_state import AuthContext, TokenStore
from .client_config import ClientSettings
from .member_filter import MemberListState, SearchCategory, filter_members
from .party_logos import PartyLogoResolver
from . import views

logger = logging.getLogger(__name__)

# CLI option -> wire field, in form order
MEMBER_FIELDS = (
    ("name", "name", "Name"),
    ("constituency", "constituency", "Constituency"),
    ("session_name", "sessionName", "Session Name"),
    ("session_date", "sessionDate", "Session Date (YYYY-MM-DD)"),
    ("speech", "speechGiven", "Speech Given"),
    ("time_taken", "timeTaken", "Time Taken (minutes)"),
    ("party_name", "partyName", "Party Name"),
)
REQUIRED_WIRE_FIELDS = {"name", "constituency", "sessionName", "sessionDate", "speechGiven", "timeTaken"}

BROWSE_HELP = (
    "[dim]Type to search. Commands: /name [SESSION], /date [YYYY-MM-DD], "
    "/category all|name|partyName|constituency|sessionName|sessionDate, "
    "/open ID, /clear, /refresh, /quit[/dim]"
)


class ClientApp:
    """Wires settings, auth state, API client and console together."""

    def __init__(
        self,
        settings: ClientSettings,
        console: Optional[Console] = None,
        api: Optional[AssemblyApiClient] = None,
        auth: Optional[AuthContext] = None,
    ):
        self.settings = settings
        self.console = console or Console()
        self.auth = auth or AuthContext(TokenStore(settings.TOKEN_FILE)).init()
        self.api = api or AssemblyApiClient(
            settings.API_URL,
            token_provider=lambda: self.auth.token,
            timeout=settings.REQUEST_TIMEOUT,
        )
        self.logos = PartyLogoResolver(self.api.resolve_media_url)

    def require_admin(self) -> bool:
        if self.auth.is_authenticated:
            return True
        views.show_error(self.console, "Please log in as admin first (assembly login)")
        return False

    def report(self, error: ApiError) -> int:
        views.show_error(self.console, error.message)
        if error.is_unauthorized and self.auth.is_authenticated:
            self.console.print("[dim]Your session may have expired. Log in again with: assembly login[/dim]")
        return 1


def _member_fields_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    fields = {}
    for option, wire_name, _label in MEMBER_FIELDS:
        value = getattr(args, option, None)
        if value is not None:
            fields[wire_name] = value
    return fields


def cmd_list(app: ClientApp, args: argparse.Namespace) -> int:
    try:
        members = app.api.list_members()
    except ApiError as e:
        return app.report(e)
    filtered = filter_members(
        members,
        session_name=args.session_name,
        session_date=args.session_date,
        search_text=args.search or "",
        category=SearchCategory(args.category),
    )
    views.render_member_list(app.console, filtered)
    return 0


def cmd_filters(app: ClientApp, args: argparse.Namespace) -> int:
    try:
        options = app.api.get_filter_options()
    except ApiError as e:
        return app.report(e)
    views.render_filter_options(app.console, options.get("sessionNames", []), options.get("sessionDates", []))
    return 0


def cmd_show(app: ClientApp, args: argparse.Namespace) -> int:
    try:
        member = app.api.get_member(args.member_id)
    except ApiError as e:
        return app.report(e)
    views.render_member_detail(app.console, member, app.logos)
    return 0


def _refresh_state(app: ClientApp, state: MemberListState) -> bool:
    try:
        members = app.api.list_members()
        options = app.api.get_filter_options()
    except ApiError as e:
        app.report(e)
        return False
    state.set_filter_options(options.get("sessionNames", []), options.get("sessionDates", []))
    state.set_members(members)
    return True


def _browse_command(app: ClientApp, state: MemberListState, line: str) -> bool:
    """Handle one slash command. Returns False to leave the browser."""
    command, _, value = line[1:].partition(" ")
    value = value.strip()

    if command in ("quit", "q", "exit"):
        return False
    if command == "name":
        if value and value not in state.session_names:
            views.show_error(app.console, f"Unknown session name. Choose from: {', '.join(state.session_names)}")
        else:
            state.set_session_name(value or None)
    elif command == "date":
        if value and value not in state.session_dates:
            views.show_error(app.console, f"Unknown session date. Choose from: {', '.join(state.session_dates)}")
        else:
            state.set_session_date(value or None)
    elif command == "category":
        try:
            state.set_search_category(SearchCategory(value or "all"))
        except ValueError:
            views.show_error(app.console, f"Unknown search category: {value}")
    elif command == "clear":
        state.clear_filters()
        state.clear_search()
    elif command == "refresh":
        _refresh_state(app, state)
    elif command == "open":
        member = next((m for m in state.members if str(m.get("id")) == value), None)
        if member is None:
            views.show_error(app.console, "Member not found")
        else:
            views.render_member_detail(app.console, member, app.logos)
        return True
    else:
        app.console.print(BROWSE_HELP)
        return True

    views.render_member_list(app.console, state.filtered)
    return True


def cmd_browse(app: ClientApp, args: argparse.Namespace) -> int:
    state = MemberListState(debounce_seconds=app.settings.SEARCH_DEBOUNCE_SECONDS)
    if not _refresh_state(app, state):
        return 1

    views.render_member_list(app.console, state.filtered)
    app.console.print(BROWSE_HELP)
    try:
        while True:
            line = Prompt.ask("[bold]search[/bold]", default="", show_default=False, console=app.console)
            if line.startswith("/"):
                if not _browse_command(app, state, line.strip()):
                    break
                continue
            # A whole line arrives at once; apply the pending search without waiting
            state.set_search_text(line)
            state.flush()
            views.render_member_list(app.console, state.filtered)
    except (KeyboardInterrupt, EOFError):
        app.console.print()
    finally:
        state.close()
    return 0


def cmd_login(app: ClientApp, args: argparse.Namespace) -> int:
    email = args.email or Prompt.ask("Email", console=app.console)
    password = Prompt.ask("Password", password=True, console=app.console)
    if not email or not password:
        views.show_error(app.console, "Please enter email and password")
        return 1

    try:
        token = app.api.login(email.strip(), password)
    except ApiError as e:
        return app.report(e)

    app.auth.login(token)
    views.show_success(app.console, "Logged in as admin")
    return 0


def cmd_whoami(app: ClientApp, args: argparse.Namespace) -> int:
    if not app.auth.is_authenticated:
        app.console.print("Not logged in")
        return 1
    try:
        identity = app.api.whoami()
    except ApiError as e:
        return app.report(e)
    app.console.print(f"Logged in as [bold]{escape(str(identity.get('email')))}[/bold]")
    return 0


def cmd_logout(app: ClientApp, args: argparse.Namespace) -> int:
    if not app.auth.is_authenticated:
        app.console.print("Not logged in")
        return 0
    if not args.yes and not Confirm.ask("Are you sure you want to logout?", console=app.console):
        return 0
    app.auth.logout()
    views.show_success(app.console, "Logged out")
    return 0


def cmd_add(app: ClientApp, args: argparse.Namespace) -> int:
    if not app.require_admin():
        return 1

    fields = _member_fields_from_args(args)
    for option, wire_name, label in MEMBER_FIELDS:
        if wire_name in REQUIRED_WIRE_FIELDS and not str(fields.get(wire_name, "")).strip():
            fields[wire_name] = Prompt.ask(label, console=app.console)

    if any(not str(fields.get(name, "")).strip() for name in REQUIRED_WIRE_FIELDS):
        views.show_error(app.console, "Please fill all fields")
        return 1

    try:
        member = app.api.create_member(fields, image=args.image, party_logo=args.party_logo)
    except ApiError as e:
        return app.report(e)

    views.show_success(app.console, f"Member added successfully (id {member.get('id')})")
    return 0


def cmd_edit(app: ClientApp, args: argparse.Namespace) -> int:
    if not app.require_admin():
        return 1

    fields = _member_fields_from_args(args)
    if not fields and args.image is None and args.party_logo is None:
        views.show_error(app.console, "Nothing to update. Pass at least one field to change.")
        return 1

    try:
        app.api.update_member(args.member_id, fields, image=args.image, party_logo=args.party_logo)
    except ApiError as e:
        return app.report(e)

    views.show_success(app.console, "Member updated successfully")
    return 0


def cmd_delete(app: ClientApp, args: argparse.Namespace) -> int:
    if not app.require_admin():
        return 1

    try:
        member = app.api.get_member(args.member_id)
    except ApiError as e:
        return app.report(e)

    question = f"Are you sure you want to delete {member.get('name', 'this member')}?"
    if not args.yes and not Confirm.ask(question, console=app.console):
        app.console.print("Cancelled")
        return 0

    try:
        app.api.delete_member(args.member_id)
    except ApiError as e:
        return app.report(e)

    views.show_success(app.console, "Member deleted successfully")
    return 0


def _add_member_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name")
    parser.add_argument("--constituency")
    parser.add_argument("--session-name", dest="session_name")
    parser.add_argument("--session-date", dest="session_date", help="YYYY-MM-DD")
    parser.add_argument("--speech", help="Speech given")
    parser.add_argument("--time-taken", dest="time_taken", help="Minutes")
    parser.add_argument("--party-name", dest="party_name")
    parser.add_argument("--image", help="Path to the member photo")
    parser.add_argument("--party-logo", dest="party_logo", help="Path to the party logo")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assembly",
        description="Browse and manage legislative assembly members and their speeches.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log HTTP calls")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List members")
    list_parser.add_argument("--session-name", dest="session_name")
    list_parser.add_argument("--session-date", dest="session_date", help="YYYY-MM-DD")
    list_parser.add_argument("--search")
    list_parser.add_argument(
        "--category", default=SearchCategory.ALL.value,
        choices=[c.value for c in SearchCategory],
    )
    list_parser.set_defaults(handler=cmd_list)

    subparsers.add_parser("filters", help="Show session names and dates").set_defaults(handler=cmd_filters)

    show_parser = subparsers.add_parser("show", help="Show member details")
    show_parser.add_argument("member_id", type=int)
    show_parser.set_defaults(handler=cmd_show)

    subparsers.add_parser("browse", help="Interactive search").set_defaults(handler=cmd_browse)

    login_parser = subparsers.add_parser("login", help="Admin login")
    login_parser.add_argument("--email")
    login_parser.set_defaults(handler=cmd_login)

    subparsers.add_parser("whoami", help="Check the stored admin session").set_defaults(handler=cmd_whoami)

    logout_parser = subparsers.add_parser("logout", help="Admin logout")
    logout_parser.add_argument("-y", "--yes", action="store_true")
    logout_parser.set_defaults(handler=cmd_logout)

    add_parser = subparsers.add_parser("add", help="Add a member (admin)")
    _add_member_options(add_parser)
    add_parser.set_defaults(handler=cmd_add)

    edit_parser = subparsers.add_parser("edit", help="Edit a member (admin)")
    edit_parser.add_argument("member_id", type=int)
    _add_member_options(edit_parser)
    edit_parser.set_defaults(handler=cmd_edit)

    delete_parser = subparsers.add_parser("delete", help="Delete a member (admin)")
    delete_parser.add_argument("member_id", type=int)
    delete_parser.add_argument("-y", "--yes", action="store_true")
    delete_parser.set_defaults(handler=cmd_delete)

    return parser


def main(argv: Optional[List[str]] = None, app: Optional[ClientApp] = None) -> int:
    args = create_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.ERROR,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    app = app or ClientApp(ClientSettings())
    return args.handler(app, args)


if __name__ == "__main__":
    sys.exit(main())

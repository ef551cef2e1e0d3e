"""
Terminal views of the member directory, rendered with rich.
"""
from typing import Any, Dict, Iterable, List, Optional

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .member_filter import session_day
from .party_logos import PartyLogoResolver

Member = Dict[str, Any]

APP_TITLE = "Delhi Legislative Assembly"
SPEECH_PREVIEW_LENGTH = 80


def format_time_taken(minutes: Any) -> str:
    """10.0 -> "10 min", 2.5 -> "2.5 min"."""
    try:
        value = float(minutes)
    except (TypeError, ValueError):
        return "-"
    return f"{value:g} min"


def speech_preview(speech: Optional[str], length: int = SPEECH_PREVIEW_LENGTH) -> str:
    text = " ".join((speech or "").split())
    if len(text) <= length:
        return text
    return text[:length].rstrip() + "..."


def render_member_list(
    console: Console,
    members: List[Member],
    title: str = APP_TITLE,
    empty_message: str = "No members found",
) -> None:
    if not members:
        console.print(Panel(Text(empty_message, justify="center", style="dim"), title=title))
        return

    table = Table(title=title, show_lines=False, expand=True)
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Party")
    table.add_column("Constituency")
    table.add_column("Session")
    table.add_column("Date", no_wrap=True)
    table.add_column("Time", justify="right", no_wrap=True)
    table.add_column("Speech", style="italic")

    for member in members:
        table.add_row(
            str(member.get("id", "")),
            Text(member.get("name") or ""),
            Text(member.get("partyName") or "-"),
            Text(member.get("constituency") or ""),
            Text(member.get("sessionName") or ""),
            session_day(member),
            format_time_taken(member.get("timeTaken")),
            Text(speech_preview(member.get("speechGiven"))),
        )
    console.print(table)
    console.print(f"[dim]{len(members)} member(s)[/dim]")


def render_member_detail(
    console: Console,
    member: Member,
    logo_resolver: PartyLogoResolver,
) -> None:
    details = Table.grid(padding=(0, 2))
    details.add_column(style="bold")
    details.add_column()
    details.add_row("Constituency:", Text(member.get("constituency") or ""))
    details.add_row("Party:", Text(member.get("partyName") or "-"))
    details.add_row("Session Name:", Text(member.get("sessionName") or ""))
    details.add_row("Session Date:", session_day(member))
    details.add_row("Time Taken:", format_time_taken(member.get("timeTaken")))

    photo = logo_resolver.media_resolver(member.get("imageUrl"))
    logo = logo_resolver.resolve(member)
    if photo:
        details.add_row("Photo:", Text(photo))
    if logo:
        details.add_row("Party Logo:", Text(logo))

    speech = Panel(Text(member.get("speechGiven") or ""), title="Speech Given", border_style="dim")
    console.print(Panel(Group(details, speech), title=Text(member.get("name") or "", style="bold")))


def render_filter_options(console: Console, session_names: Iterable[str], session_dates: Iterable[str]) -> None:
    table = Table(title="Filters", expand=False)
    table.add_column("Session Names")
    table.add_column("Session Dates")
    names, dates = list(session_names), list(session_dates)
    for index in range(max(len(names), len(dates))):
        table.add_row(
            Text(names[index] if index < len(names) else ""),
            Text(dates[index] if index < len(dates) else ""),
        )
    console.print(table)


def show_success(console: Console, message: str) -> None:
    console.print(f"[green]Success:[/green] {escape(message)}")


def show_error(console: Console, message: Optional[str]) -> None:
    console.print(f"[red]Error:[/red] {escape(message or 'Operation failed')}")

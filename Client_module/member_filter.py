"""
Client-side filtering of the member list.

filter_members() is a pure function of (members, session name, session day,
search text, search category). MemberListState keeps the snapshot fetched on
the last refresh and re-runs that function locally: dropdown changes apply
immediately, typed search text only after the debounce delay.
"""
import threading
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from Login_module.Utils.datetime_utils import to_iso_day

Member = Dict[str, Any]


class SearchCategory(str, Enum):
    ALL = "all"
    NAME = "name"
    PARTY_NAME = "partyName"
    CONSTITUENCY = "constituency"
    SESSION_NAME = "sessionName"
    SESSION_DATE = "sessionDate"


# Fields searched when no single category is selected
ALL_SEARCH_FIELDS = (
    SearchCategory.NAME,
    SearchCategory.PARTY_NAME,
    SearchCategory.CONSTITUENCY,
    SearchCategory.SESSION_NAME,
    SearchCategory.SESSION_DATE,
)


def session_day(member: Member) -> str:
    """The member's session date as displayed: its UTC calendar day, "YYYY-MM-DD"."""
    try:
        return to_iso_day(member.get("sessionDate")) or ""
    except (TypeError, ValueError):
        return ""


def _field_text(member: Member, category: SearchCategory) -> str:
    if category == SearchCategory.SESSION_DATE:
        return session_day(member)
    value = member.get(category.value)
    return "" if value is None else str(value)


def matches_search(member: Member, search_text: str, category: SearchCategory = SearchCategory.ALL) -> bool:
    """Case-insensitive substring match on one field, or on every text field for ALL."""
    needle = (search_text or "").strip().casefold()
    if not needle:
        return True

    if category == SearchCategory.ALL:
        haystacks = [_field_text(member, field) for field in ALL_SEARCH_FIELDS]
        haystacks.append(str(member.get("speechGiven") or ""))
    else:
        haystacks = [_field_text(member, category)]
    return any(needle in text.casefold() for text in haystacks)


def filter_members(
    members: Iterable[Member],
    session_name: Optional[str] = None,
    session_date: Optional[str] = None,
    search_text: str = "",
    category: SearchCategory = SearchCategory.ALL,
) -> List[Member]:
    """
    Apply, in order: exact session name, exact session day, then search text.
    Empty filter values are ignored. The input order is preserved.
    """
    filtered = list(members)

    if session_name:
        filtered = [m for m in filtered if m.get("sessionName") == session_name]

    if session_date:
        try:
            wanted_day = to_iso_day(session_date)
        except ValueError:
            return []
        filtered = [m for m in filtered if session_day(m) == wanted_day]

    if search_text and search_text.strip():
        category = SearchCategory(category)
        filtered = [m for m in filtered if matches_search(m, search_text, category)]

    return filtered


class Debouncer:
    """
    Runs callback once, delay seconds after the last trigger().
    Every trigger() cancels the pending run and schedules a new one.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.delay = delay
        self.callback = callback
        self.timer_factory = timer_factory
        self._timer = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def trigger(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = self.timer_factory(self.delay, lambda: self._fire(timer))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def flush(self) -> bool:
        """Run a pending callback now. Returns False when nothing was pending."""
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
        self.callback()
        return True

    def _fire(self, timer) -> None:
        with self._lock:
            # No longer the pending timer
            if self._timer is not timer:
                return
            self._timer = None
        self.callback()


class MemberListState:
    """Member snapshot plus the current filter inputs and the filtered view."""

    def __init__(
        self,
        debounce_seconds: float = 0.5,
        on_change: Optional[Callable[[List[Member]], None]] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.members: List[Member] = []
        self.session_names: List[str] = []
        self.session_dates: List[str] = []
        self.session_name_filter: Optional[str] = None
        self.session_date_filter: Optional[str] = None
        self.search_text = ""
        self.search_category = SearchCategory.ALL
        self.filtered: List[Member] = []
        self.on_change = on_change
        self._applied_search_text = ""
        self._lock = threading.RLock()
        self._debouncer = Debouncer(debounce_seconds, self._apply_search, timer_factory=timer_factory)

    # Snapshot ------------------------------------------------------------

    def set_members(self, members: Iterable[Member]) -> None:
        with self._lock:
            self.members = list(members)
            self._recompute()

    def set_filter_options(self, session_names: Iterable[str], session_dates: Iterable[str]) -> None:
        with self._lock:
            self.session_names = list(session_names)
            self.session_dates = list(session_dates)

    # Filter inputs -------------------------------------------------------

    def set_session_name(self, session_name: Optional[str]) -> None:
        with self._lock:
            self.session_name_filter = session_name or None
            self._recompute()

    def set_session_date(self, session_date: Optional[str]) -> None:
        with self._lock:
            self.session_date_filter = session_date or None
            self._recompute()

    def set_search_category(self, category: SearchCategory) -> None:
        with self._lock:
            self.search_category = SearchCategory(category)
            self._recompute()

    def set_search_text(self, text: str) -> None:
        """Record typed text; the list is re-filtered after the debounce delay."""
        with self._lock:
            self.search_text = text or ""
        self._debouncer.trigger()

    def clear_filters(self) -> None:
        with self._lock:
            self.session_name_filter = None
            self.session_date_filter = None
            self._recompute()

    def clear_search(self) -> None:
        self._debouncer.cancel()
        with self._lock:
            self.search_text = ""
            self._applied_search_text = ""
            self._recompute()

    @property
    def has_active_filters(self) -> bool:
        return bool(self.session_name_filter or self.session_date_filter or self.search_text.strip())

    @property
    def search_pending(self) -> bool:
        return self._debouncer.pending

    def flush(self) -> None:
        """Apply pending search text immediately."""
        self._debouncer.flush()

    def close(self) -> None:
        self._debouncer.cancel()

    # Internals -----------------------------------------------------------

    def _apply_search(self) -> None:
        with self._lock:
            self._applied_search_text = self.search_text
            self._recompute()

    def _recompute(self) -> None:
        self.filtered = filter_members(
            self.members,
            session_name=self.session_name_filter,
            session_date=self.session_date_filter,
            search_text=self._applied_search_text,
            category=self.search_category,
        )
        if self.on_change:
            self.on_change(self.filtered)

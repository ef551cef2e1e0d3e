"""
Client-side filtering and debounced search
"""
from Client_module.member_filter import (
    Debouncer, MemberListState, SearchCategory, filter_members, matches_search
)

MEMBERS = [
    {'id': 3, 'name': 'Ravi Kumar', 'partyName': 'BJP', 'constituency': 'Rohini',
     'sessionName': 'Budget Session', 'sessionDate': '2024-01-15T00:00:00Z',
     'speechGiven': 'Water supply in the north'},
    {'id': 2, 'name': 'Asha Verma', 'partyName': 'AAP', 'constituency': 'Chandni Chowk',
     'sessionName': 'Budget Session', 'sessionDate': '2024-01-16T00:00:00Z',
     'speechGiven': 'Public schools'},
    {'id': 1, 'name': 'Imran Ali', 'partyName': '', 'constituency': 'Okhla',
     'sessionName': 'Winter Session', 'sessionDate': '2023-12-01T10:00:00Z',
     'speechGiven': 'Yamuna cleanup'},
]


class FakeTimer:
    """Stands in for threading.Timer; fires only when told to"""
    created = []

    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.started = False
        self.daemon = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.callback()


def ids(members):
    return [m['id'] for m in members]


class TestFilterMembers:
    def test_no_filters_returns_everything_in_order(self):
        assert ids(filter_members(MEMBERS)) == [3, 2, 1]

    def test_session_name_and_day(self):
        assert ids(filter_members(MEMBERS, session_name='Budget Session')) == [3, 2]
        assert ids(filter_members(MEMBERS, session_date='2024-01-16')) == [2]
        assert ids(filter_members(MEMBERS, session_name='Winter Session', session_date='2024-01-16')) == []

    def test_search_single_category(self):
        assert ids(filter_members(MEMBERS, search_text='bjp', category=SearchCategory.PARTY_NAME)) == [3]
        assert ids(filter_members(MEMBERS, search_text='ROHINI', category=SearchCategory.NAME)) == []
        assert ids(filter_members(MEMBERS, search_text='2023-12', category=SearchCategory.SESSION_DATE)) == [1]

    def test_search_all_fields(self):
        assert ids(filter_members(MEMBERS, search_text='chowk')) == [2]
        assert ids(filter_members(MEMBERS, search_text='yamuna')) == [1]

    def test_filters_and_search_combine(self):
        result = filter_members(
            MEMBERS, session_name='Budget Session', search_text='asha', category='name'
        )
        assert ids(result) == [2]

    def test_input_is_not_modified(self):
        snapshot = [dict(m) for m in MEMBERS]
        filter_members(MEMBERS, session_name='Budget Session', search_text='a')
        assert MEMBERS == snapshot

    def test_blank_search_matches(self):
        assert matches_search(MEMBERS[0], '   ')

    def test_invalid_day_matches_nothing(self):
        assert filter_members(MEMBERS, session_date='not a day') == []


class TestDebouncer:
    def setup_method(self):
        FakeTimer.created = []

    def test_only_last_trigger_fires(self):
        calls = []
        debouncer = Debouncer(0.5, lambda: calls.append(1), timer_factory=FakeTimer)

        debouncer.trigger()
        debouncer.trigger()
        debouncer.trigger()

        first, second, last = FakeTimer.created
        assert first.cancelled and second.cancelled and not last.cancelled
        assert all(timer.delay == 0.5 and timer.daemon for timer in FakeTimer.created)
        last.fire()
        assert calls == [1]
        assert not debouncer.pending

    def test_stale_timer_keeps_newer_one_pending(self):
        calls = []
        debouncer = Debouncer(0.5, lambda: calls.append(1), timer_factory=FakeTimer)

        debouncer.trigger()
        stale = FakeTimer.created[0]
        debouncer.trigger()
        # The first timer already fired and was waiting for the lock
        stale.callback()

        assert calls == []
        assert debouncer.pending
        debouncer.cancel()
        assert FakeTimer.created[1].cancelled
        assert not debouncer.pending

    def test_flush_and_cancel(self):
        calls = []
        debouncer = Debouncer(0.5, lambda: calls.append(1), timer_factory=FakeTimer)

        assert debouncer.flush() is False
        debouncer.trigger()
        assert debouncer.flush() is True
        assert calls == [1]

        debouncer.trigger()
        debouncer.cancel()
        assert not debouncer.pending
        assert calls == [1]


class TestMemberListState:
    def setup_method(self):
        FakeTimer.created = []

    def make_state(self, changes=None):
        state = MemberListState(
            debounce_seconds=0.5,
            on_change=changes.append if changes is not None else None,
            timer_factory=FakeTimer,
        )
        state.set_members(MEMBERS)
        return state

    def test_dropdown_filters_apply_immediately(self):
        state = self.make_state()

        state.set_session_name('Budget Session')
        assert ids(state.filtered) == [3, 2]

        state.set_session_date('2024-01-15')
        assert ids(state.filtered) == [3]
        assert state.has_active_filters

        state.clear_filters()
        assert ids(state.filtered) == [3, 2, 1]
        assert not state.has_active_filters

    def test_search_waits_for_debounce(self):
        changes = []
        state = self.make_state(changes)

        state.set_search_text('a')
        state.set_search_text('as')
        state.set_search_text('asha')

        assert ids(state.filtered) == [3, 2, 1]
        assert state.search_pending

        FakeTimer.created[-1].fire()

        assert ids(state.filtered) == [2]
        # set_members plus one debounced search
        assert len(changes) == 2

    def test_flush_applies_pending_search(self):
        state = self.make_state()

        state.set_search_text('okhla')
        state.flush()

        assert ids(state.filtered) == [1]

    def test_clear_search_cancels_pending(self):
        state = self.make_state()

        state.set_search_text('asha')
        state.clear_search()

        assert not state.search_pending
        assert ids(state.filtered) == [3, 2, 1]

    def test_category_change_reapplies_search(self):
        state = self.make_state()
        state.set_search_text('session')
        state.flush()
        assert ids(state.filtered) == [3, 2, 1]

        state.set_search_category(SearchCategory.NAME)

        assert state.filtered == []

    def test_new_snapshot_keeps_filters(self):
        state = self.make_state()
        state.set_session_name('Winter Session')

        state.set_members(MEMBERS[:2])

        assert state.filtered == []


def test_session_day_example():
    members = [
        {'name': 'A Singh', 'sessionName': 'Winter2024', 'sessionDate': '2024-01-15', 'timeTaken': 10},
        {'name': 'B Kumar', 'sessionName': 'Winter2024', 'sessionDate': '2024-01-16', 'timeTaken': 5},
    ]

    assert filter_members(members, session_date='2024-01-15') == [members[0]]


def test_result_does_not_depend_on_input_order():
    FakeTimer.created = []
    expected = filter_members(
        MEMBERS, session_name='Budget Session', session_date='2024-01-16',
        search_text='chowk', category=SearchCategory.CONSTITUENCY,
    )

    forward = MemberListState(timer_factory=FakeTimer)
    forward.set_members(MEMBERS)
    forward.set_session_name('Budget Session')
    forward.set_session_date('2024-01-16')
    forward.set_search_category(SearchCategory.CONSTITUENCY)
    forward.set_search_text('chowk')
    forward.flush()

    backward = MemberListState(timer_factory=FakeTimer)
    backward.set_search_text('chowk')
    backward.flush()
    backward.set_search_category(SearchCategory.CONSTITUENCY)
    backward.set_session_date('2024-01-16')
    backward.set_session_name('Budget Session')
    backward.set_members(MEMBERS)

    assert ids(expected) == [2]
    assert forward.filtered == backward.filtered == expected

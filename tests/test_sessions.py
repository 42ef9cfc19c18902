"""Unit tests for auth/sessions.py -- the in-memory session registry.

Covers:
- set() records and overwrites, clear() removes and tolerates absent ids
- matches() compares against the current entry only
- independent registries do not share state
- concurrent writers from many threads leave a consistent map
"""

import threading

from auth.sessions import SessionRegistry


def test_set_then_get() -> None:
    sessions = SessionRegistry()
    sessions.set(1, "tok-a")
    assert sessions.get(1) == "tok-a"
    assert 1 in sessions
    assert len(sessions) == 1


def test_set_overwrites_previous_token() -> None:
    sessions = SessionRegistry()
    sessions.set(1, "tok-a")
    sessions.set(1, "tok-b")
    assert sessions.get(1) == "tok-b"
    assert len(sessions) == 1


def test_clear_removes_entry() -> None:
    sessions = SessionRegistry()
    sessions.set(1, "tok-a")
    sessions.clear(1)
    assert sessions.get(1) is None
    assert 1 not in sessions


def test_clear_absent_id_is_noop() -> None:
    sessions = SessionRegistry()
    sessions.set(2, "tok")
    sessions.clear(1)
    assert len(sessions) == 1


def test_matches_only_current_token() -> None:
    sessions = SessionRegistry()
    assert not sessions.matches(1, "tok-a")
    sessions.set(1, "tok-a")
    sessions.set(1, "tok-b")
    assert not sessions.matches(1, "tok-a")
    assert sessions.matches(1, "tok-b")


def test_registries_are_independent() -> None:
    first, second = SessionRegistry(), SessionRegistry()
    first.set(1, "tok")
    assert second.get(1) is None


def test_concurrent_writers() -> None:
    """Each thread owns 200 ids, sets them all, then clears the odd ones."""
    sessions = SessionRegistry()
    threads_count, per_thread = 8, 200

    def worker(offset: int) -> None:
        ids = range(offset * per_thread, (offset + 1) * per_thread)
        for user_id in ids:
            sessions.set(user_id, f"tok-{user_id}")
        for user_id in ids:
            if user_id % 2:
                sessions.clear(user_id)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(threads_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(sessions) == threads_count * per_thread // 2
    assert all(sessions.get(uid) == f"tok-{uid}" for uid in range(0, threads_count * per_thread, 2))


def test_concurrent_overwrites_of_one_id_leave_one_entry() -> None:
    sessions = SessionRegistry()
    tokens = [f"tok-{i}" for i in range(50)]
    threads = [threading.Thread(target=sessions.set, args=(1, tok)) for tok in tokens]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(sessions) == 1
    assert sessions.get(1) in tokens

from __future__ import annotations

import threading

from src.ops_portal.core.enums import Operation


def test_initial_snapshot_is_delivered_synchronously(hub):
    rows = [1, 2]
    query = hub.watch("leave-permits", lambda: list(rows))

    assert not query.loading
    assert query.data == [1, 2]


def test_notify_refreshes_only_that_collection(hub):
    permits = [1]
    attendance = ["a"]
    pq = hub.watch("leave-permits", lambda: list(permits))
    aq = hub.watch("attendance", lambda: list(attendance))

    permits.append(2)
    attendance.append("b")
    hub.notify("leave-permits")

    assert pq.data == [1, 2]
    assert aq.data == ["a"]


def test_listener_called_per_snapshot(hub):
    seen = []
    hub.watch("leave-permits", lambda: [], listener=lambda q: seen.append(list(q.data)))
    hub.notify("leave-permits")
    assert seen == [[], []]


def test_closed_query_gets_no_updates(hub):
    rows = [1]
    query = hub.watch("leave-permits", lambda: list(rows))
    query.close()
    rows.append(2)
    hub.notify("leave-permits")

    assert query.data == [1]
    assert hub.subscriber_count("leave-permits") == 0


def test_read_error_sets_flag_and_publishes(hub, errors):
    def fetch():
        raise RuntimeError("permission-denied")

    query = hub.watch("leave-permits", fetch)

    assert query.error is not None
    assert query.data is None
    assert not query.loading
    assert errors[0].operation == Operation.LIST


def test_error_clears_on_next_good_snapshot(hub):
    state = {"fail": True}

    def fetch():
        if state["fail"]:
            raise RuntimeError("offline")
        return [1]

    query = hub.watch("attendance", fetch)
    state["fail"] = False
    hub.notify("attendance")

    assert query.error is None
    assert query.data == [1]


def test_slow_older_fetch_does_not_overwrite_newer_snapshot(hub):
    state = {"version": 1}
    stalled = threading.Event()
    release = threading.Event()

    def fetch():
        rows = [state["version"]]
        if threading.current_thread().name == "slow-writer":
            stalled.set()
            release.wait(5)
        return rows

    query = hub.watch("leave-permits", fetch)
    slow = threading.Thread(target=hub.notify, args=("leave-permits",), name="slow-writer")
    slow.start()
    assert stalled.wait(5)

    state["version"] = 2
    hub.notify("leave-permits")
    assert query.data == [2]

    release.set()
    slow.join(5)

    assert not slow.is_alive()
    assert query.data == [2]

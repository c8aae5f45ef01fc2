from tailmon.models import LogRecord
from tailmon.parser import parse_line
from tailmon.store import RecordStore

from conftest import BASE, at_offset, make_line


def _rec(processed_at, user="james", at=None):
    return parse_line(make_line(user, at=at), now=processed_at)


def test_ingest_keeps_insertion_order_and_duplicates():
    store = RecordStore()
    a, b = _rec(1.0, "a"), _rec(2.0, "b")
    for r in (a, b, a):
        store.ingest(r)
    assert store.size() == 3
    assert [r.remote_user for r in store.last_n(store.size())] == ["a", "b", "a"]


def test_prune_is_strictly_older_than_cutoff():
    store = RecordStore()
    for ts in (10.0, 11.0, 12.0):
        store.ingest(_rec(ts))
    assert store.prune_older_than(11.0) == 1
    assert [r.processed_at for r in store.last_n(store.size())] == [11.0, 12.0]


def test_prune_twice_with_same_cutoff_is_idempotent():
    store = RecordStore()
    for ts in (1.0, 5.0, 9.0):
        store.ingest(_rec(ts))
    store.prune_older_than(6.0)
    first = store.size()
    assert store.prune_older_than(6.0) == 0
    assert store.size() == first == 1


def test_prune_on_time_local_handles_out_of_order_records():
    store = RecordStore(ignore_timestamp=False)
    users = ["new", "old", "newer", "older"]
    offsets = [100, 0, 200, -50]
    for user, off in zip(users, offsets):
        store.ingest(_rec(0.0, user, at=at_offset(off)))

    removed = store.prune_older_than(at_offset(50).timestamp())

    assert removed == 2
    assert [r.remote_user for r in store.last_n(store.size())] == ["new", "newer"]


def test_records_without_time_local_are_never_pruned():
    store = RecordStore(ignore_timestamp=False)
    store.ingest(LogRecord(path="/x", section="/x", processed_at=0.0))
    assert store.prune_older_than(BASE.timestamp() + 1e6) == 0
    assert store.size() == 1


def test_last_n_returns_most_recent_in_order():
    store = RecordStore()
    for i in range(15):
        store.ingest(_rec(float(i), f"u{i}"))
    assert [r.remote_user for r in store.last_n(3)] == ["u12", "u13", "u14"]
    assert len(store.last_n(100)) == 15
    assert store.last_n(0) == []


def test_last_n_on_empty_store_returns_one_placeholder_row():
    rows = RecordStore().last_n(10)
    assert len(rows) == 1
    row = rows[0]
    assert row.remote_addr == row.remote_user == row.method == row.path == row.section == ""
    assert row.time_local is None
    assert row.request == ""

import json
import threading

from hostwatch.snapshot_store import SnapshotStore


def test_concurrent_queries_never_see_torn_or_unordered_results():
    store = SnapshotStore(max_snapshots=16)
    total = 2000
    stop = threading.Event()
    errors = []

    def producer():
        try:
            for ts in range(1, total + 1):
                # Payload carries its own stamp and a filler the reader can check
                store.append(ts, json.dumps({"timestamp": ts, "fill": "x" * (ts % 50)}).encode())
        finally:
            stop.set()

    def reader(threshold):
        while not stop.is_set():
            try:
                items = json.loads(store.query_since(threshold))
                stamps = [i["timestamp"] for i in items]
                assert len(stamps) <= 16
                assert all(ts > threshold for ts in stamps)
                assert stamps == sorted(stamps)
                # The ring only ever holds a contiguous run of stamps
                assert stamps == list(range(stamps[0], stamps[0] + len(stamps))) if stamps else True
                assert all(len(i["fill"]) == i["timestamp"] % 50 for i in items)
            except AssertionError as e:
                errors.append(e)
                return

    readers = [threading.Thread(target=reader, args=(t,)) for t in (0, 0, 500, 1500)]
    for r in readers:
        r.start()
    p = threading.Thread(target=producer)
    p.start()
    p.join(timeout=30)
    for r in readers:
        r.join(timeout=30)

    assert not errors
    assert len(store) == 16
    assert store.latest_timestamp() == total

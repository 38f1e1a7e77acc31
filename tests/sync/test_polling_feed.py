import threading

from ponto_exato.core.enums import Collection
from ponto_exato.core.exceptions import BackendError
from ponto_exato.sync.polling_feed import PollingSnapshotFeed


def test_first_read_is_delivered_synchronously_and_unchanged_reads_are_not():
    docs = [{"id": "c1", "companyCode": "ABC123"}]
    reads = []

    def source(code):
        reads.append(code)
        return list(docs)

    feed = PollingSnapshotFeed({Collection.EMPLOYEES: source}, interval=60)
    delivered = []
    sub = feed.subscribe(Collection.EMPLOYEES, "ABC123", delivered.append, lambda e: None)
    try:
        assert delivered == [docs]
        sub.poll_once()
        assert len(delivered) == 1

        docs.append({"id": "c2", "companyCode": "ABC123"})
        sub.poll_once()
        assert [len(d) for d in delivered] == [1, 2]
        assert reads == ["ABC123"] * 3
    finally:
        sub.unsubscribe()


def test_read_failure_goes_to_error_callback():
    def source(code):
        raise BackendError("Falha de conexão com o banco de dados")

    feed = PollingSnapshotFeed({Collection.RECORDS: source}, interval=60)
    errors = []
    sub = feed.subscribe(Collection.RECORDS, "ABC123", lambda docs: None, errors.append)
    sub.unsubscribe()

    assert len(errors) == 1
    assert isinstance(errors[0], BackendError)


def test_background_thread_delivers_changes_until_unsubscribed():
    version = {"n": 0}
    changed = threading.Event()

    def source(code):
        version["n"] += 1
        return [{"id": "r", "v": version["n"]}]

    def on_snapshot(docs):
        if docs[0]["v"] > 1:
            changed.set()

    feed = PollingSnapshotFeed({Collection.RECORDS: source}, interval=0.01)
    sub = feed.subscribe(Collection.RECORDS, "ABC123", on_snapshot, lambda e: None)
    try:
        assert changed.wait(2.0)
    finally:
        sub.unsubscribe()
    assert not sub.active


def test_change_marker_skips_full_reads_until_it_moves():
    docs = [{"id": "r1"}]
    marker = {"value": (1, "08:00")}
    reads = []

    def source(code):
        reads.append(code)
        return list(docs)

    feed = PollingSnapshotFeed(
        {Collection.RECORDS: source},
        markers={Collection.RECORDS: lambda code: marker["value"]},
        interval=60,
    )
    delivered = []
    sub = feed.subscribe(Collection.RECORDS, "ABC123", delivered.append, lambda e: None)
    try:
        sub.poll_once()
        sub.poll_once()
        assert len(reads) == 1

        docs.append({"id": "r2"})
        marker["value"] = (2, "12:00")
        sub.poll_once()

        assert len(reads) == 2
        assert [len(d) for d in delivered] == [1, 2]
    finally:
        sub.unsubscribe()

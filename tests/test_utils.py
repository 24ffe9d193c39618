import threading
import time

from mtproto.utils import (
    SyncMap,
    SyncSet,
    auth_key_hash,
    generate_message_id,
    generate_session_id,
    sha1,
)


def test_message_id_layout():
    before = int(time.time())
    msg_id = generate_message_id()
    after = int(time.time())
    assert msg_id % 4 == 0
    assert before <= msg_id >> 32 <= after
    assert msg_id & 0xFFFFFFFF < 1_000_000_000


def test_sha1_known_vector():
    assert sha1(b"abc").hex() == "a9993e364706816aba3e25717850c26c9cd0d89d"


def test_auth_key_hash_is_slice_of_sha1():
    key = bytes(range(256))
    assert auth_key_hash(key) == sha1(key)[12:20]
    assert len(auth_key_hash(key)) == 8


def test_session_id_range():
    ids = {generate_session_id() for _ in range(50)}
    assert all(0 <= i < 1 << 63 for i in ids)
    assert len(ids) > 1


def test_sync_set_operations():
    s = SyncSet()
    assert s.add(5) is True
    assert s.add(5) is False
    assert s.has(5) is True
    assert s.delete(5) is True
    assert s.delete(5) is False
    s.add(1)
    s.add(2)
    s.reset()
    assert len(s) == 0


def test_sync_map_operations():
    m = SyncMap()
    m.add(1, "a")
    m.add(2, "b")
    assert m.has(1) is True
    assert m.get(2) == "b"
    assert m.get(3) is None
    assert sorted(m.keys()) == [1, 2]
    assert m.delete(1) is True
    assert m.delete(1) is False
    assert m.keys() == [2]


def test_sync_map_concurrent_adds():
    m = SyncMap()

    def worker(base):
        for i in range(200):
            m.add(base * 1000 + i, i)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(m.keys()) == 8 * 200
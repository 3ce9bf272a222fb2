import threading
import time

import pytest

from thronion.utils import ReadWriteLock


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    inside = threading.Barrier(3, timeout=2.0)

    def reader() -> None:
        with lock.read_locked():
            inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for thread in threads:
        thread.start()
    with lock.read_locked():
        inside.wait()
    for thread in threads:
        thread.join(2.0)

    assert lock.readers == 0


def test_writer_waits_for_readers():
    lock = ReadWriteLock()
    events = []
    lock.acquire_read()

    def writer() -> None:
        with lock.write_locked():
            events.append("write")

    thread = threading.Thread(target=writer)
    thread.start()
    time.sleep(0.05)
    events.append("read-release")
    lock.release_read()
    thread.join(2.0)

    assert events == ["read-release", "write"]


def test_waiting_writer_blocks_new_readers():
    lock = ReadWriteLock()
    order = []
    lock.acquire_read()

    writer = threading.Thread(target=lambda: (lock.acquire_write(), order.append("write"), lock.release_write()))
    writer.start()
    time.sleep(0.05)

    reader = threading.Thread(target=lambda: (lock.acquire_read(), order.append("read"), lock.release_read()))
    reader.start()
    time.sleep(0.05)
    assert order == []

    lock.release_read()
    writer.join(2.0)
    reader.join(2.0)
    assert order == ["write", "read"]


def test_unbalanced_release_raises():
    lock = ReadWriteLock()

    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()

import threading

import pytest

from db_pool import SQLiteConnectionPool


def test_connections_are_reused(tmp_path):
    pool = SQLiteConnectionPool(str(tmp_path / "pool.db"), max_connections=2)
    with pool.get_connection() as first:
        pass
    with pool.get_connection() as second:
        pass
    assert first is second
    pool.close_all()


def test_uncommitted_work_is_rolled_back(tmp_path):
    pool = SQLiteConnectionPool(str(tmp_path / "pool.db"), max_connections=1)
    with pool.get_connection() as con:
        con.execute("CREATE TABLE t (v INTEGER)")
        con.commit()
        con.execute("INSERT INTO t VALUES (1)")
    with pool.get_connection() as con:
        assert con.execute("SELECT COUNT(*) FROM t").fetchone()[0] == 0
    pool.close_all()


def test_pool_is_bounded_across_threads(tmp_path):
    pool = SQLiteConnectionPool(str(tmp_path / "pool.db"), max_connections=2)
    seen = set()
    lock = threading.Lock()

    def worker():
        for _ in range(20):
            with pool.get_connection() as con:
                con.execute("SELECT 1").fetchone()
                with lock:
                    seen.add(id(con))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert 1 <= len(seen) <= 2
    pool.close_all()


def test_rejects_empty_pool():
    with pytest.raises(ValueError):
        SQLiteConnectionPool(":memory:", max_connections=0)

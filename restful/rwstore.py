"""並行アクセス用の Store デコレータ。

単一スレッド前提の Store 実装を、読み取り/書き込みロックで包んで
複数スレッドから安全に使えるようにする。
"""

import threading
from contextlib import contextmanager

from restful.interfaces.store import ID, Store, T


class RWLock:
    """読み取り/書き込みロック。

    読み取りは並行に進められる。書き込みは他の読み取り・書き込みを全て排除する。
    待機中の書き込みがあれば新しい読み取りは待たされる（書き込み優先）。
    再入はサポートしない。
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._waiting_writers = 0

    @contextmanager
    def read_locked(self):
        """共有ロックを保持した状態でブロックを実行する。"""
        with self._cond:
            while self._writing or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self):
        """排他ロックを保持した状態でブロックを実行する。"""
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class RWStore(Store[T]):
    """別の Store を包み、読み書きの排他制御を行う。

    - get / get_all は共有ロック
    - put / update / delete は排他ロック
    - new はロックなしで委譲（共有状態に触れない）

    ロックは1回の委譲呼び出しだけを包む。複合操作の原子性は提供しない。
    結果も例外もそのまま呼び出し元へ返す。
    包んだ後に元の Store を直接操作すると排他の保証は失われる。
    """

    def __init__(self, store: Store[T]) -> None:
        self._store = store
        self._lock = RWLock()

    def new(self) -> T:
        return self._store.new()

    def get(self, id: ID) -> T:
        with self._lock.read_locked():
            return self._store.get(id)

    def get_all(self) -> list[T]:
        with self._lock.read_locked():
            return self._store.get_all()

    def put(self, value: T) -> T:
        with self._lock.write_locked():
            return self._store.put(value)

    def update(self, id: ID, value: T) -> None:
        with self._lock.write_locked():
            self._store.update(id, value)

    def delete(self, id: ID) -> None:
        with self._lock.write_locked():
            self._store.delete(id)

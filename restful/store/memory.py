"""Store層のインメモリ実装。

スレッドセーフではない。並行アクセスする場合は RWStore で包むこと。
"""

import copy
import uuid
from collections.abc import Callable

from restful.interfaces.store import ID, MissingError, Store, T


class MemoryStore(Store[T]):
    """dict によるStore実装。

    レコードは id_attr 属性にIDを持つこと。
    出し入れの際にディープコピーするため、呼び出し側がレコードを
    書き換えてもストアの内容は変わらない。
    """

    def __init__(self, factory: Callable[[], T], id_attr: str = "id") -> None:
        """初期化。

        Args:
            factory: ゼロ値レコードを返す関数
            id_attr: レコードのID属性名
        """
        self._factory = factory
        self._id_attr = id_attr
        self._records: dict[ID, T] = {}

    def new(self) -> T:
        return self._factory()

    def get(self, id: ID) -> T:
        try:
            return copy.deepcopy(self._records[id])
        except KeyError:
            raise MissingError(id) from None

    def get_all(self) -> list[T]:
        return [copy.deepcopy(r) for r in self._records.values()]

    def put(self, value: T) -> T:
        """レコードを作成する。IDが空なら採番する。同じIDは上書き。"""
        record = copy.deepcopy(value)
        record_id = getattr(record, self._id_attr, None)
        if not record_id:
            record_id = uuid.uuid4().hex
            setattr(record, self._id_attr, record_id)
        self._records[ID(record_id)] = record
        return copy.deepcopy(record)

    def update(self, id: ID, value: T) -> None:
        """レコードを置き換える。レコードのIDはパスのIDに揃える。"""
        if id not in self._records:
            raise MissingError(id)
        record = copy.deepcopy(value)
        setattr(record, self._id_attr, id)
        self._records[id] = record

    def delete(self, id: ID) -> None:
        try:
            del self._records[id]
        except KeyError:
            raise MissingError(id) from None

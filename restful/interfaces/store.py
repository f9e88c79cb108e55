"""Store層の抽象インターフェース。

1種類のレコードからなるコレクションに対するCRUD契約を定める。
永続化の方法は実装側（restful/store/ や HTTPクライアント）の責務。
"""

from abc import ABC, abstractmethod
from typing import Generic, NewType, TypeVar

ID = NewType("ID", str)
"""コレクション内でレコードを一意に指す不透明なトークン。"""

T = TypeVar("T")


class MissingError(LookupError):
    """指定IDのレコードが存在しない。

    HTTP層はこの例外だけを 404 に対応付ける。
    """

    def __init__(self, id: ID) -> None:
        super().__init__(id)
        self.id = id

    def __str__(self) -> str:
        return f"not found: {self.id!r}"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MissingError) and other.id == self.id

    def __hash__(self) -> int:
        return hash((MissingError, self.id))


class Store(ABC, Generic[T]):
    """レコードコレクションの抽象インターフェース。

    get_all() はレコードが0件でも None ではなく空リストを返すこと。
    「0件」と「失敗」の区別は例外の有無だけで行う。
    """

    @abstractmethod
    def new(self) -> T:
        """デコード先となるゼロ値のレコードを生成する。"""
        ...

    @abstractmethod
    def get(self, id: ID) -> T:
        """指定IDのレコードを取得する。

        Raises:
            MissingError: レコードが存在しない場合
        """
        ...

    @abstractmethod
    def get_all(self) -> list[T]:
        """全レコードを取得する。0件なら空リスト。"""
        ...

    @abstractmethod
    def put(self, value: T) -> T:
        """レコードを新規作成する。

        IDが未設定なら実装側で採番する。

        Returns:
            保存されたレコード（採番済みID を含む）
        """
        ...

    @abstractmethod
    def update(self, id: ID, value: T) -> None:
        """指定IDのレコードを置き換える。

        Raises:
            MissingError: レコードが存在しない場合
        """
        ...

    @abstractmethod
    def delete(self, id: ID) -> None:
        """指定IDのレコードを削除する。

        Raises:
            MissingError: レコードが存在しない場合（削除済みを含む）
        """
        ...


class ClientStore(Store[T]):
    """一覧取得用のゼロ値リストを生成できる Store。

    一覧と単体ではワイヤ上の形が異なるため、ファクトリを分ける。
    """

    @abstractmethod
    def new_list(self):
        """get_all() のデコード先となる空のリスト型を生成する。"""
        ...

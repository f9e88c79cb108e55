"""同梱アプリが公開するレコード型。"""

from pydantic import BaseModel, Field, RootModel


class Item(BaseModel):
    """IDとペイロードだけを持つ汎用レコード。

    全フィールドにデフォルト値があるので Item() がゼロ値になる。
    """

    id: str = ""
    payload: str = ""


class ItemList(RootModel[list[Item]]):
    """GET / のレスポンス形（Item の配列）。"""

    root: list[Item] = Field(default_factory=list)

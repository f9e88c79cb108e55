"""Store層のSQLite実装。

pydantic モデルを JSON 文書として1テーブルに保存する。
"""

import sqlite3
import uuid
from typing import TypeVar

from pydantic import BaseModel

from restful.interfaces.store import ID, MissingError, Store

M = TypeVar("M", bound=BaseModel)

# スキーマ定義
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS records (
    id          TEXT PRIMARY KEY,
    body        TEXT NOT NULL,
    created_at  TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""


class SqliteStore(Store[M]):
    """SQLiteによるStore実装。

    操作ごとに接続を開くため、単体でもスレッドをまたいで使える。
    ただし複数の書き込みを直列化したい場合は RWStore で包むこと。
    """

    def __init__(self, model: type[M], db_path: str, id_attr: str = "id"):
        """初期化。

        Args:
            model: レコードの pydantic モデル（全フィールドにデフォルト値が必要）
            db_path: SQLiteデータベースファイルのパス
            id_attr: レコードのID属性名
        """
        self._model = model
        self._db_path = db_path
        self._id_attr = id_attr
        self._init_schema()

    def _init_schema(self):
        """スキーマを初期化する。"""
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def _connect(self) -> sqlite3.Connection:
        """データベース接続を取得する。"""
        return sqlite3.connect(self._db_path)

    def new(self) -> M:
        return self._model()

    def get(self, id: ID) -> M:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT body FROM records WHERE id = ?", (id,)
            ).fetchone()
        if row is None:
            raise MissingError(id)
        return self._model.model_validate_json(row[0])

    def get_all(self) -> list[M]:
        """全レコードを作成順に取得する。"""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT body FROM records ORDER BY created_at ASC, rowid ASC"
            ).fetchall()
        return [self._model.model_validate_json(row[0]) for row in rows]

    def put(self, value: M) -> M:
        """レコードを作成する。IDが空なら採番し、既存IDは上書きする。"""
        record = value.model_copy(deep=True)
        if not getattr(record, self._id_attr, None):
            setattr(record, self._id_attr, uuid.uuid4().hex)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO records (id, body) VALUES (?, ?)
                ON CONFLICT(id) DO UPDATE SET body = excluded.body
                """,
                (getattr(record, self._id_attr), record.model_dump_json()),
            )
            conn.commit()
        return record

    def update(self, id: ID, value: M) -> None:
        record = value.model_copy(deep=True)
        setattr(record, self._id_attr, id)
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE records SET body = ? WHERE id = ?",
                (record.model_dump_json(), id),
            )
            conn.commit()
        if cursor.rowcount == 0:
            raise MissingError(id)

    def delete(self, id: ID) -> None:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM records WHERE id = ?", (id,))
            conn.commit()
        if cursor.rowcount == 0:
            raise MissingError(id)

"""DI用ファクトリ関数。

restful/ 直下に配置することで、server/ から store/ への
直接依存を避けつつ、同梱アプリの Store を差し替えられる。
"""

from pathlib import Path

from restful.codec.json_codec import JSONCodec
from restful.config import get_settings
from restful.interfaces.item import Item
from restful.interfaces.store import Store
from restful.rwstore import RWStore
from restful.server.handler import DEFAULT_UPDATE_METHODS, Handler

_store: Store[Item] | None = None
_handler: Handler[Item] | None = None


def get_store() -> Store[Item]:
    """設定に応じた Store を RWStore で包んだシングルトンを返す。"""
    global _store
    if _store is None:
        settings = get_settings()
        if settings.store_backend == "sqlite":
            from restful.store.sqlite import SqliteStore

            Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
            backing = SqliteStore(Item, settings.db_path)
        elif settings.store_backend == "memory":
            from restful.store.memory import MemoryStore

            backing = MemoryStore(Item)
        else:
            raise ValueError(f"Unknown store backend: {settings.store_backend}")
        _store = RWStore(backing)
    return _store


def get_handler() -> Handler[Item]:
    """Handler のシングルトンを返す。"""
    global _handler
    if _handler is None:
        methods = DEFAULT_UPDATE_METHODS
        if get_settings().accept_patch:
            methods = (*methods, "PATCH")
        _handler = Handler(get_store(), JSONCodec(), update_methods=methods)
    return _handler


def _reset_all() -> None:
    """全シングルトンをリセットする（テスト用）。"""
    global _store, _handler
    _store = None
    _handler = None
    get_settings.cache_clear()

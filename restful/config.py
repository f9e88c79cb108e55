"""環境変数からの設定読み込み。

routers や store がそれぞれ os.environ を読まないよう、ここに集約する。
"""

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    """環境変数の型付きビュー。"""

    store_backend: str
    db_path: str
    mount_path: str
    accept_patch: bool
    log_level: str
    client_timeout: float


def _float(value: str | None, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@lru_cache
def get_settings() -> Settings:
    """現在の環境変数から Settings を構築する。"""
    mount_path = "/" + os.getenv("RESTFUL_MOUNT_PATH", "/api/records").strip("/")
    return Settings(
        store_backend=os.getenv("RESTFUL_STORE_BACKEND", "memory").strip().lower(),
        db_path=os.getenv("RESTFUL_DB_PATH", "data/records.db"),
        mount_path=mount_path.rstrip("/"),
        accept_patch=_bool(os.getenv("RESTFUL_ACCEPT_PATCH"), False),
        log_level=os.getenv("RESTFUL_LOG_LEVEL", "INFO"),
        client_timeout=_float(os.getenv("RESTFUL_CLIENT_TIMEOUT"), 10.0),
    )

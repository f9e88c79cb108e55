"""FastAPIアプリケーション。

ヘルスチェックと、設定されたマウントポイントへの Handler の組み込みだけを行う。
import 時には何も構築しない。起動はファクトリ経由で行う:

    uvicorn restful.server.main:create_app --factory
"""

from fastapi import FastAPI

from restful.config import Settings, get_settings
from restful.dependencies import get_handler
from restful.log import configure_logging
from restful.server.handler import Handler


def create_app(
    handler: Handler | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """アプリケーションを構築する。

    Args:
        handler: 公開する Handler。省略時は設定から構築したシングルトン
        settings: 省略時は環境変数から読み込む
    """
    if settings is None:
        settings = get_settings()
    if handler is None:
        handler = get_handler()
    configure_logging(settings.log_level)

    app = FastAPI(title="restful API", version="0.1.0")

    @app.get("/health")
    async def health_check():
        """ヘルスチェック。"""
        return {"status": "ok"}

    app.include_router(handler.as_router(settings.mount_path))
    return app

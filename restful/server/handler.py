"""HTTPリクエストを Store の操作に振り分けるハンドラ。

マウントポイント直下の1セグメントだけをIDとして扱う。
ルーティングツリーやミドルウェアは持たない。
"""

import io
import logging
from collections.abc import Iterable
from typing import Generic

from fastapi import APIRouter, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from restful.codec.json_codec import JSONCodec
from restful.interfaces.codec import Codec, DecodingError, EncodingError
from restful.interfaces.store import ID, MissingError, Store, T

logger = logging.getLogger(__name__)

HTTP_200 = 200
HTTP_400 = 400
HTTP_404 = 404
HTTP_405 = 405
HTTP_500 = 500

DEFAULT_UPDATE_METHODS = ("POST", "PUT")
"""作成・更新に使うメソッド。PATCH は明示的に指定した場合のみ受け付ける。"""


def _error_response(status_code: int, message: str, headers=None) -> Response:
    """エラーレスポンスを構築する。内部の例外メッセージは含めない。"""
    return PlainTextResponse(message, status_code=status_code, headers=headers)


class Handler(Generic[T]):
    """Codec と Store の組。HTTPメソッドとパスを Store の1操作に対応付ける。

    | メソッド          | パスが空  | パス = id         |
    |-------------------|-----------|-------------------|
    | GET               | get_all   | get(id)           |
    | update_methods    | put(body) | update(id, body)  |
    | DELETE            | delete    | delete(id)        |
    | その他            | 405       | 405               |
    """

    def __init__(
        self,
        store: Store[T] | None,
        codec: Codec,
        update_methods: Iterable[str] = DEFAULT_UPDATE_METHODS,
    ) -> None:
        self.store = store
        self.codec = codec
        self.update_methods = frozenset(m.upper() for m in update_methods)

    def dispatch(self, method: str, path: str, body: bytes | None) -> Response:
        """1リクエストを処理し、レスポンスを1つ返す。

        Args:
            method: HTTPメソッド
            path: マウントポイントからの相対パス
            body: リクエストボディ。空なら None

        Returns:
            ステータスとボディが確定したレスポンス
        """
        if self.store is None:
            return Response()

        # マウントポイントに末尾スラッシュがあってもなくても同じ扱い
        path = path.strip("/")
        method = method.upper()
        logger.debug("dispatch %s /%s", method, path)

        if method == "GET":
            if not path:
                return self._handle_get_all()
            return self._handle_get(ID(path))
        if method in self.update_methods:
            if not path:
                return self._handle_put(body)
            return self._handle_update(ID(path), body)
        if method == "DELETE":
            return self._handle_delete(ID(path))

        logger.warning("Method not allowed: %s", method)
        allowed = ", ".join(sorted({"GET", "DELETE"} | self.update_methods))
        return _error_response(
            HTTP_405, "method not allowed", headers={"Allow": allowed}
        )

    # ---------- 各操作 ----------

    def _handle_get_all(self) -> Response:
        try:
            records = self.store.get_all()
        except Exception:
            return self._store_failure("get_all")
        return self._ok(records)

    def _handle_get(self, id: ID) -> Response:
        try:
            record = self.store.get(id)
        except MissingError as exc:
            return self._not_found(exc)
        except Exception:
            return self._store_failure("get")
        if record is None:
            return self._not_found(MissingError(id))
        return self._ok(record)

    def _handle_put(self, body: bytes | None) -> Response:
        try:
            record = self._decode(body)
        except DecodingError as exc:
            return self._bad_request(exc)
        try:
            stored = self.store.put(record)
        except Exception:
            return self._store_failure("put")
        return self._ok(stored)

    def _handle_update(self, id: ID, body: bytes | None) -> Response:
        try:
            record = self._decode(body)
        except DecodingError as exc:
            return self._bad_request(exc)
        try:
            self.store.update(id, record)
        except MissingError as exc:
            return self._not_found(exc)
        except Exception:
            return self._store_failure("update")
        return Response(status_code=HTTP_200)

    def _handle_delete(self, id: ID) -> Response:
        try:
            self.store.delete(id)
        except MissingError as exc:
            return self._not_found(exc)
        except Exception:
            return self._store_failure("delete")
        return Response(status_code=HTTP_200)

    # ---------- ヘルパー ----------

    def _decode(self, body: bytes | None) -> T:
        """ボディを store.new() のインスタンスにデコードする。"""
        if not body:
            raise DecodingError("request body is required")
        return self.codec.decode(io.BytesIO(body), self.store.new())

    def _ok(self, value) -> Response:
        """value を全てエンコードしてから 200 を返す。"""
        buf = io.BytesIO()
        try:
            self.codec.encode(buf, value)
        except EncodingError:
            logger.exception("Failed to encode response")
            return _error_response(HTTP_500, "internal server error")
        return Response(
            content=buf.getvalue(),
            status_code=HTTP_200,
            media_type=self.codec.content_type,
        )

    def _not_found(self, exc: MissingError) -> Response:
        logger.warning("Record not found: %s", exc.id)
        return _error_response(HTTP_404, str(exc))

    def _bad_request(self, exc: DecodingError) -> Response:
        logger.warning("Bad request: %s", exc)
        return _error_response(HTTP_400, "bad request")

    def _store_failure(self, operation: str) -> Response:
        logger.exception("Store %s failed", operation)
        return _error_response(HTTP_500, "internal server error")

    # ---------- FastAPI 連携 ----------

    async def endpoint(self, request: Request) -> Response:
        """FastAPI のエンドポイント。Store の呼び出しはスレッドプールで実行する。"""
        body = await request.body()
        path = request.path_params.get("path", "")
        return await run_in_threadpool(
            self.dispatch, request.method, path, body or None
        )

    def as_router(self, prefix: str = "") -> APIRouter:
        """prefix 以下の全パスをこのハンドラに渡す APIRouter を返す。

        メソッドでは絞り込まない。HEAD や独自メソッドも dispatch に届き、
        Allow ヘッダ付きの 405 になる。
        """
        prefix = prefix.strip("/")
        prefix = f"/{prefix}" if prefix else ""
        router = APIRouter()
        router.add_route(
            prefix + "/{path:path}", self.endpoint, include_in_schema=False
        )
        if prefix:
            router.add_route(prefix, self.endpoint, include_in_schema=False)
        return router


def new_json_handler(
    store: Store[T] | None,
    update_methods: Iterable[str] = DEFAULT_UPDATE_METHODS,
) -> Handler[T]:
    """JSON Codec を使う Handler を生成する。"""
    return Handler(store, JSONCodec(), update_methods=update_methods)

"""Store の操作を HTTP リクエストに変換するクライアント。

Handler と同じメソッド・パスの対応表を使う。
"""

import io
import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx

from restful.codec.json_codec import JSONCodec
from restful.config import get_settings
from restful.interfaces.codec import Codec
from restful.interfaces.store import ID, ClientStore, MissingError, T

logger = logging.getLogger(__name__)

HTTP_404 = 404


class NoResponseBodyError(Exception):
    """ボディを期待したレスポンスにボディがなかった。"""

    def __init__(self) -> None:
        super().__init__("no response body from server")


class UnexpectedStatusError(Exception):
    """想定外のステータスコードを受け取った。

    Attributes:
        status_code: 数値のステータスコード
        status: サーバーが返したステータステキスト（reason phrase）
    """

    def __init__(self, status_code: int, status: str) -> None:
        super().__init__(f"{status_code} {status}".strip())
        self.status_code = status_code
        self.status = status


class Client(ClientStore[T]):
    """RESTful HTTP クライアント。

    ClientStore を実装するので、アプリケーションからはリモートの
    コレクションをローカルの Store と同じように扱える。
    通信失敗（httpx.TransportError）はそのまま送出する。再試行はしない。
    """

    def __init__(
        self,
        url: str,
        new_func: Callable[[], T],
        new_list_func: Callable[[], Any],
        codec: Codec,
        http_client: httpx.Client | None = None,
        update_method: str = "POST",
        timeout: float = 10.0,
    ) -> None:
        """初期化。

        Args:
            url: コレクションのベースURL
            new_func: 単体レコードのデコード先を返す関数
            new_list_func: 一覧のデコード先を返す関数
            codec: ボディのシリアライズ方式
            http_client: 送信に使う httpx.Client。省略時は内部で生成し、close() で閉じる
            update_method: update() に使うメソッド（POST / PUT / PATCH）
            timeout: http_client を内部生成する場合のタイムアウト秒数
        """
        self.url = url.rstrip("/")
        self.new_func = new_func
        self.new_list_func = new_list_func
        self.codec = codec
        self.update_method = update_method.upper()
        self._owns_http = http_client is None
        if http_client is None:
            http_client = httpx.Client(timeout=timeout)
        self._http = http_client

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """内部で生成した httpx.Client を閉じる。"""
        if self._owns_http:
            self._http.close()

    def new(self) -> T:
        return self.new_func()

    def new_list(self):
        return self.new_list_func()

    def get(self, id: ID) -> T:
        resp = self._do("GET", self._endpoint(id))
        if resp.status_code == HTTP_404:
            raise MissingError(id)
        _raise_for_status(resp)
        return self._decode(resp, self.new())

    def get_all(self):
        """全レコードを new_list() のインスタンスにデコードして返す。"""
        resp = self._do("GET", self.url)
        _raise_for_status(resp)
        return self._decode(resp, self.new_list())

    def put(self, value: T) -> T:
        """レコードを作成し、サーバーが保存したレコードを返す。"""
        body = self._encode(value)
        resp = self._do("POST", self.url, body)
        _raise_for_status(resp)
        return self._decode(resp, self.new())

    def update(self, id: ID, value: T) -> None:
        url = self._endpoint(id)
        body = self._encode(value)
        resp = self._do(self.update_method, url, body)
        if resp.status_code == HTTP_404:
            raise MissingError(id)
        _raise_for_status(resp)

    def delete(self, id: ID) -> None:
        resp = self._do("DELETE", self._endpoint(id))
        if resp.status_code == HTTP_404:
            raise MissingError(id)
        _raise_for_status(resp)

    # ---------- ヘルパー ----------

    def _do(
        self, method: str, url: str, body: bytes | None = None
    ) -> httpx.Response:
        logger.debug("%s %s", method, url)
        headers = {}
        if body is not None:
            headers["Content-Type"] = self.codec.content_type
        return self._http.request(method, url, content=body, headers=headers)

    def _endpoint(self, id: ID) -> str:
        """レコードのURLを返す。

        空のIDはコレクション自体のURLになってしまうため、送信せずに
        MissingError とする（空IDのレコードは採番により存在し得ない）。
        """
        if not id:
            raise MissingError(id)
        return f"{self.url}/{quote(str(id), safe='')}"

    def _encode(self, value: T) -> bytes:
        buf = io.BytesIO()
        self.codec.encode(buf, value)
        return buf.getvalue()

    def _decode(self, resp: httpx.Response, target):
        if not resp.content:
            raise NoResponseBodyError()
        return self.codec.decode(io.BytesIO(resp.content), target)


def _raise_for_status(resp: httpx.Response) -> None:
    """2xx 以外を UnexpectedStatusError に変換する。"""
    if not resp.is_success:
        raise UnexpectedStatusError(resp.status_code, resp.reason_phrase)


def new_json_client(
    url: str,
    new_func: Callable[[], T],
    new_list_func: Callable[[], Any],
    http_client: httpx.Client | None = None,
    update_method: str = "POST",
    timeout: float | None = None,
) -> Client[T]:
    """JSON Codec を使う Client を生成する。

    timeout 省略時は RESTFUL_CLIENT_TIMEOUT の値を使う。
    """
    if timeout is None:
        timeout = get_settings().client_timeout
    return Client(
        url,
        new_func,
        new_list_func,
        JSONCodec(),
        http_client=http_client,
        update_method=update_method,
        timeout=timeout,
    )

"""pydantic ベースの JSON Codec 実装。"""

import json
from typing import Any, BinaryIO, TypeVar

from pydantic import BaseModel, RootModel, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from restful.interfaces.codec import Codec, DecodingError, EncodingError

T = TypeVar("T")

CONTENT_TYPE = "application/json"


class JSONCodec(Codec):
    """JSON 形式の Codec。

    デコード先として pydantic モデル（RootModel を含む）、dict、list を受け付ける。
    モデルへのデコードは、ボディに含まれるフィールドだけを target の現在値に
    上書きしてから検証する。
    """

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE

    def encode(self, sink: BinaryIO, value: Any) -> None:
        try:
            data = to_json(value)
        except PydanticSerializationError as exc:
            raise EncodingError(
                f"cannot encode value of type {type(value).__name__}"
            ) from exc
        sink.write(data)

    def decode(self, source: BinaryIO, target: T) -> T:
        raw = source.read()
        if not raw.strip():
            raise DecodingError("empty body")
        try:
            payload = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            raise DecodingError(f"malformed JSON: {type(exc).__name__}") from exc

        if isinstance(target, BaseModel):
            return _decode_model(payload, target)
        if isinstance(target, dict):
            if not isinstance(payload, dict):
                raise DecodingError("expected a JSON object")
            target.update(payload)
            return target
        if isinstance(target, list):
            if not isinstance(payload, list):
                raise DecodingError("expected a JSON array")
            target[:] = payload
            return target
        raise DecodingError(
            f"unsupported decode target: {type(target).__name__}"
        )


def _decode_model(payload: Any, target: BaseModel) -> BaseModel:
    """payload を検証し、結果のフィールドを target にコピーする。"""
    model = type(target)
    if not isinstance(target, RootModel) and isinstance(payload, dict):
        payload = {**target.model_dump(), **payload}
    try:
        decoded = model.model_validate(payload)
    except ValidationError as exc:
        raise DecodingError(
            f"{exc.error_count()} validation error(s) for {model.__name__}"
        ) from exc
    for name in model.model_fields:
        setattr(target, name, getattr(decoded, name))
    return target

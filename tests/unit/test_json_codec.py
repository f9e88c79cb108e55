"""JSONCodec のユニットテスト。"""

import io
import json

import pytest
from pydantic import BaseModel

from restful.codec.json_codec import CONTENT_TYPE, JSONCodec
from restful.interfaces.codec import DecodingError, EncodingError
from restful.interfaces.item import Item, ItemList


class Person(BaseModel):
    """ネストしたフィールドを持つテスト用レコード。"""

    first: str = ""
    last: str = ""
    tags: list[str] = []


@pytest.fixture
def codec() -> JSONCodec:
    return JSONCodec()


def _encode(codec: JSONCodec, value) -> bytes:
    buf = io.BytesIO()
    codec.encode(buf, value)
    return buf.getvalue()


class TestContentType:
    def test_is_application_json(self, codec):
        assert codec.content_type == CONTENT_TYPE == "application/json"


class TestEncode:
    """エンコードのテスト。"""

    def test_model(self, codec):
        data = _encode(codec, Item(id="a", payload="hello"))
        assert json.loads(data) == {"id": "a", "payload": "hello"}

    def test_list_of_models(self, codec):
        data = _encode(codec, [Item(id="a"), Item(id="b")])
        assert [d["id"] for d in json.loads(data)] == ["a", "b"]

    def test_empty_list_is_array(self, codec):
        """空リストは null ではなく [] になる。"""
        assert json.loads(_encode(codec, [])) == []

    def test_unserializable_raises_encoding_error(self, codec):
        with pytest.raises(EncodingError):
            _encode(codec, {"handle": object()})


class TestDecode:
    """デコードのテスト。"""

    def test_round_trip(self, codec):
        """エンコード→デコードで元の値に戻る。"""
        for original in (
            Item(id="a", payload="hello"),
            Person(first="Ada", last="Lovelace", tags=["math"]),
        ):
            data = _encode(codec, original)
            decoded = codec.decode(io.BytesIO(data), type(original)())
            assert decoded == original

    def test_updates_target_in_place(self, codec):
        target = Item()
        result = codec.decode(io.BytesIO(b'{"id": "a", "payload": "x"}'), target)
        assert result is target
        assert target.id == "a"
        assert target.payload == "x"

    def test_partial_body_overlays_target(self, codec):
        """ボディにないフィールドは target の現在値を保つ。"""
        target = Item(id="keep", payload="old")
        codec.decode(io.BytesIO(b'{"payload": "new"}'), target)
        assert target == Item(id="keep", payload="new")

    def test_root_model_list(self, codec):
        target = ItemList()
        codec.decode(io.BytesIO(b'[{"id": "a"}, {"id": "b"}]'), target)
        assert [i.id for i in target.root] == ["a", "b"]

    def test_plain_dict_and_list_targets(self, codec):
        d: dict = {}
        codec.decode(io.BytesIO(b'{"k": 1}'), d)
        assert d == {"k": 1}

        lst: list = []
        codec.decode(io.BytesIO(b"[1, 2]"), lst)
        assert lst == [1, 2]

    @pytest.mark.parametrize("body", [b"", b"   ", b"{not json", b"[1, 2"])
    def test_malformed_raises_decoding_error(self, codec, body):
        with pytest.raises(DecodingError):
            codec.decode(io.BytesIO(body), Item())

    def test_schema_mismatch_raises_decoding_error(self, codec):
        with pytest.raises(DecodingError):
            codec.decode(io.BytesIO(b'{"payload": {"nested": true}}'), Item())

    def test_array_into_model_raises_decoding_error(self, codec):
        with pytest.raises(DecodingError):
            codec.decode(io.BytesIO(b"[]"), Item())

    def test_object_into_list_raises_decoding_error(self, codec):
        with pytest.raises(DecodingError):
            codec.decode(io.BytesIO(b"{}"), [])

    def test_failed_decode_leaves_target_untouched(self, codec):
        target = Item(id="a", payload="hello")
        with pytest.raises(DecodingError):
            codec.decode(io.BytesIO(b'{"payload": 12.5}'), target)
        assert target == Item(id="a", payload="hello")


class TestDeepNesting:
    """深いネストでも DecodingError になり、RecursionError は漏れない。"""

    def test_deeply_nested_array_raises_decoding_error(self, codec):
        with pytest.raises(DecodingError):
            codec.decode(io.BytesIO(b"[" * 100_000), [])

    def test_deeply_nested_object_raises_decoding_error(self, codec):
        with pytest.raises(DecodingError):
            codec.decode(io.BytesIO(b'{"a":' * 100_000), Item())

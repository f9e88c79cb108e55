"""シリアライズ層の抽象インターフェース。

Codec はレコードとバイト列の相互変換だけを担う。状態を持たない。
"""

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, TypeVar

T = TypeVar("T")


class EncodingError(ValueError):
    """値をシリアライズできなかった。"""


class DecodingError(ValueError):
    """入力が壊れている、または型が一致しない。"""


class Codec(ABC):
    """エンコード・デコードと Content-Type を提供する抽象基底クラス。"""

    @property
    @abstractmethod
    def content_type(self) -> str:
        """このCodecが生成・受理するボディのMIMEタイプ。"""
        ...

    @abstractmethod
    def encode(self, sink: BinaryIO, value: Any) -> None:
        """value をシリアライズして sink に書き込む。

        Raises:
            EncodingError: value の形がCodecと互換でない場合
        """
        ...

    @abstractmethod
    def decode(self, source: BinaryIO, target: T) -> T:
        """source のバイト列をデシリアライズし、target をその場で更新する。

        Args:
            source: 読み取り元
            target: ファクトリが返したゼロ値インスタンス（可変であること）

        Returns:
            更新後の target

        Raises:
            DecodingError: 空入力・不正な入力・スキーマ不一致の場合
        """
        ...

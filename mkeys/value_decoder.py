# value_decoder.py
import binascii
import logging
from typing import Any, Callable, Dict

from .errors import UnknownValueType, ValueDecodeError
from .parser import TransparentStorageKey

logger = logging.getLogger(__name__)

DecodeFn = Callable[[bytes], Any]


class ValueDecoderRegistry:
    """타입 이름 → 스토리지 값 디코드 함수

    SCALE 디코딩 자체는 호출자가 등록하는 함수가 담당한다.
    """

    def __init__(self):
        self._decoders: Dict[str, DecodeFn] = {}

    def register(self, type_name: str, decode_fn: DecodeFn, replace: bool = False):
        if type_name in self._decoders and not replace:
            raise ValueError(f"Decoder already registered for {type_name!r}")
        self._decoders[type_name] = decode_fn

    def get(self, type_name: str) -> DecodeFn:
        try:
            return self._decoders[type_name]
        except KeyError:
            raise UnknownValueType(type_name) from None

    def decode(self, type_name: str, value_hex: str) -> Any:
        decode_fn = self.get(type_name)

        if value_hex.startswith('0x'):
            value_hex = value_hex[2:]
        try:
            encoded = binascii.unhexlify(value_hex)
        except (binascii.Error, ValueError) as e:
            raise ValueDecodeError(f"Storage value is not hex: {e}") from e

        try:
            return decode_fn(encoded)
        except Exception as e:
            logger.debug(f"{type_name} 디코딩 실패: {e}")
            raise ValueDecodeError(f"Failed to decode {type_name}: {e}") from e

    def decode_for(self, storage_key: TransparentStorageKey, value_hex: str) -> Any:
        """파싱된 키의 값 타입으로 디코딩"""
        value_type = storage_key.ty.value_type
        if not value_type:
            raise UnknownValueType(value_type)
        return self.decode(value_type, value_hex)

    def __contains__(self, type_name) -> bool:
        return type_name in self._decoders

    def __len__(self) -> int:
        return len(self._decoders)

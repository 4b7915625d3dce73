# parser.py
"""최종 스토리지 키 → 읽을 수 있는 키 변환

키 구조 (hex):
    Plain:     prefix(64)
    Map:       prefix(64) + hash(key) + key
    DoubleMap: prefix(64) + hash(key1) + key1 + hash(key2) + key2

hasher는 모두 *_concat 계열이어야 원본 키를 복원할 수 있다.
"""
import logging
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional, Union

from .errors import InvalidStorageKey, TruncatedKey, UnknownKeyLength, UnknownPrefix, UnsupportedHasher
from .hashing import PREFIX_LENGTH, StorageHasher, digest_length, is_concat
from .key_length import KeyLengthTable
from .lookup_table import StoragePrefixLookupTable
from .metadata import DoubleMapKind, MapKind, PlainKind, StorageDescriptor

logger = logging.getLogger(__name__)

_HEX = re.compile(r"^[0-9a-f]*$")


@dataclass(frozen=True)
class PlainKey:
    value_type: str = ""


@dataclass(frozen=True)
class MapKey:
    key: str
    value_type: str


@dataclass(frozen=True)
class DoubleMapKey:
    key1: str
    key1_type: str
    key2: str
    key2_type: str
    value_type: str = ""


TransparentStorageType = Union[PlainKey, MapKey, DoubleMapKey]


@dataclass(frozen=True)
class TransparentStorageKey:
    module_prefix: str
    storage_prefix: str
    ty: TransparentStorageType

    @property
    def kind(self) -> str:
        return {PlainKey: "Plain", MapKey: "Map", DoubleMapKey: "DoubleMap"}[type(self.ty)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module_prefix": self.module_prefix,
            "storage_prefix": self.storage_prefix,
            "kind": self.kind,
            **asdict(self.ty),
        }


def normalize_storage_key(storage_key: str) -> str:
    """0x 제거 및 소문자 변환, hex 형식 확인"""
    if not isinstance(storage_key, str):
        raise InvalidStorageKey(f"Storage key must be a hex string, got {type(storage_key).__name__}")

    key = storage_key.strip()
    if key.startswith(('0x', '0X')):
        key = key[2:]
    key = key.lower()

    if not _HEX.match(key):
        raise InvalidStorageKey(f"Storage key is not hex: {storage_key!r}")
    if len(key) % 2:
        raise InvalidStorageKey(f"Storage key has odd length {len(key)}: {storage_key!r}")
    return key


class StorageKeyParser:
    """lookup table과 key-length 테이블로 스토리지 키를 분해

    상태를 갖지 않으며 parse() 호출 간에 공유되는 가변 데이터가 없다.
    """

    def __init__(self, table: StoragePrefixLookupTable,
                 key_lengths: Optional[Union[KeyLengthTable, Mapping[str, int]]] = None):
        self.table = table
        if key_lengths is None:
            key_lengths = KeyLengthTable.default()
        elif not isinstance(key_lengths, KeyLengthTable):
            key_lengths = KeyLengthTable(key_lengths)
        self.key_lengths = key_lengths

    def parse(self, storage_key: str) -> TransparentStorageKey:
        """최종 스토리지 키를 파싱하여 _읽을 수 있는_ 키 반환"""
        key = normalize_storage_key(storage_key)

        if len(key) < PREFIX_LENGTH:
            raise UnknownPrefix(key, f"key shorter than {PREFIX_LENGTH} hex chars")

        prefix = key[:PREFIX_LENGTH]
        descriptor = self.table.lookup(prefix)
        if descriptor is None:
            logger.debug(f"lookup table에서 prefix를 찾을 수 없음: {prefix}")
            raise UnknownPrefix(prefix)

        hashed_key_concat = key[PREFIX_LENGTH:]
        kind = descriptor.kind

        if isinstance(kind, PlainKind):
            ty = PlainKey(value_type=kind.value_type)
        elif isinstance(kind, MapKind):
            ty = self._parse_map(descriptor, kind, hashed_key_concat)
        elif isinstance(kind, DoubleMapKind):
            ty = self._parse_double_map(descriptor, kind, hashed_key_concat)
        else:
            raise TypeError(f"Unknown storage kind for {descriptor.qualified_name}: {kind!r}")

        return TransparentStorageKey(
            module_prefix=descriptor.module_prefix,
            storage_prefix=descriptor.storage_prefix,
            ty=ty,
        )

    def _parse_map(self, descriptor: StorageDescriptor, kind: MapKind, hashed_key_concat: str) -> MapKey:
        # hashed_key ++ key
        hash_length = self._concat_digest_length(descriptor, kind.hasher, "hasher")
        _require(hash_length, len(hashed_key_concat), "hashed key")

        return MapKey(key=hashed_key_concat[hash_length:], value_type=kind.value_type)

    def _parse_double_map(self, descriptor: StorageDescriptor, kind: DoubleMapKind,
                          hashed_key_concat: str) -> DoubleMapKey:
        # hashed_key1 ++ key1 ++ hashed_key2 ++ key2
        key1_hash_length = self._concat_digest_length(descriptor, kind.hasher1, "hasher1")
        key2_hash_length = self._concat_digest_length(descriptor, kind.hasher2, "hasher2")

        _require(key1_hash_length, len(hashed_key_concat), "hashed key1")
        key1_hashed_key2_key2 = hashed_key_concat[key1_hash_length:]

        key1_length = self.key_lengths.lookup(kind.key1_type)
        if key1_length is None:
            logger.warning(
                f"{descriptor.qualified_name}: key1 타입 길이를 알 수 없음 "
                f"({kind.key1_type}, table version={self.key_lengths.version})"
            )
            raise UnknownKeyLength(kind.key1_type)

        _require(key1_length, len(key1_hashed_key2_key2), "key1")
        key1 = key1_hashed_key2_key2[:key1_length]
        hashed_key2_key2 = key1_hashed_key2_key2[key1_length:]

        _require(key2_hash_length, len(hashed_key2_key2), "hashed key2")
        key2 = hashed_key2_key2[key2_hash_length:]

        return DoubleMapKey(
            key1=key1,
            key1_type=kind.key1_type,
            key2=key2,
            key2_type=kind.key2_type,
            value_type=kind.value_type,
        )

    @staticmethod
    def _concat_digest_length(descriptor: StorageDescriptor, hasher: StorageHasher, position: str) -> int:
        if not is_concat(hasher):
            raise UnsupportedHasher(hasher, position, descriptor.module_prefix, descriptor.storage_prefix)
        return digest_length(hasher)


def _require(needed: int, available: int, segment: str):
    if available < needed:
        raise TruncatedKey(needed, available, segment)


def parse_storage_key(table: StoragePrefixLookupTable, storage_key: str,
                      key_lengths: Optional[Union[KeyLengthTable, Mapping[str, int]]] = None) -> TransparentStorageKey:
    return StorageKeyParser(table, key_lengths).parse(storage_key)

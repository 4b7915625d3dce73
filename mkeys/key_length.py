# key_length.py
"""DoubleMap key1 길이 테이블

concat hasher 뒤의 원본 키 길이는 바이트 스트림에 기록되지 않는다.
key1 타입 이름 → 인코딩 길이(hex 문자 수)를 호출자가 주입하는 테이블로 관리하고,
테이블에 없는 타입은 None을 돌려 UnknownKeyLength로 보고되게 한다.
"""
import json
import logging
import re
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .errors import ConfigError
from .metadata import MetadataDocument

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "default"

# 테스트 메타데이터에서 확인된 key1 타입
DEFAULT_KEY_LENGTHS = {
    "T::AccountId": 64,
    "SessionIndex": 8,
    "EraIndex": 8,
}

# 고정 폭 기본 타입 (SCALE 인코딩 길이, hex)
PRIMITIVE_KEY_LENGTHS = {
    "bool": 2,
    "u8": 2,
    "u16": 4,
    "u32": 8,
    "u64": 16,
    "u128": 32,
    "i8": 2,
    "i16": 4,
    "i32": 8,
    "i64": 16,
    "i128": 32,
    "AccountId32": 64,
    "H160": 40,
    "H256": 64,
}

_BYTE_ARRAY = re.compile(r"^\[u8;(\d+)\]$")


def normalize_type_name(type_name: str) -> str:
    """공백 차이 제거 ("[u8; 32]" == "[u8;32]")"""
    return re.sub(r"\s+", "", type_name)


class KeyLengthTable:
    """타입 이름 → 키 길이(hex) 조회 테이블 (불변)"""

    def __init__(self, entries: Optional[Mapping[str, int]] = None, version: str = DEFAULT_VERSION):
        normalized = {}
        for type_name, length in (entries or {}).items():
            if not isinstance(length, int) or isinstance(length, bool) or length < 0 or length % 2:
                raise ConfigError(f"Invalid key length for {type_name!r}: {length!r}")
            normalized[normalize_type_name(type_name)] = length
        self._entries = MappingProxyType(normalized)
        self.version = version

    @classmethod
    def default(cls) -> "KeyLengthTable":
        return cls(DEFAULT_KEY_LENGTHS)

    @classmethod
    def from_json_file(cls, path, version: Optional[str] = None) -> "KeyLengthTable":
        """JSON 파일 로드: {"version": ..., "entries": {...}} 또는 평평한 dict"""
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Can not read key length table {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Key length table {path} must be a JSON object")

        if "entries" in data:
            entries = data["entries"]
            file_version = data.get("version") or path.stem
        else:
            entries = data
            file_version = path.stem

        if not isinstance(entries, dict):
            raise ConfigError(f"Key length table {path}: entries must be a JSON object")

        table = cls(entries, version=version or str(file_version))
        logger.debug(f"key-length 테이블 로드: {path} (version={table.version}, {len(table)}개)")
        return table

    def lookup(self, type_name: str) -> Optional[int]:
        """타입의 인코딩 길이 (hex). 알 수 없으면 None"""
        name = normalize_type_name(type_name)

        length = self._entries.get(name)
        if length is not None:
            return length

        length = PRIMITIVE_KEY_LENGTHS.get(name)
        if length is not None:
            return length

        match = _BYTE_ARRAY.match(name)
        if match:
            return int(match.group(1)) * 2

        return None

    def extend(self, entries: Mapping[str, int], version: Optional[str] = None) -> "KeyLengthTable":
        """항목을 추가한 새 테이블 반환"""
        merged = dict(self._entries)
        merged.update(entries)
        return KeyLengthTable(merged, version=version or self.version)

    def missing_types(self, metadata: MetadataDocument) -> List[str]:
        """길이를 알 수 없는 DoubleMap key1 타입 목록"""
        missing = []
        for key1_type, _ in metadata.double_map_key_types():
            if self.lookup(key1_type) is None and key1_type not in missing:
                missing.append(key1_type)
        return missing

    def to_dict(self) -> Dict:
        return {"version": self.version, "entries": dict(self._entries)}

    def __contains__(self, type_name) -> bool:
        return self.lookup(type_name) is not None

    def __len__(self) -> int:
        return len(self._entries)

# errors.py
"""스토리지 키 파싱 오류 정의

모든 실패는 명시적인 예외로 전달된다. 추측으로 잘라낸 결과를 반환하지 않는다.
"""
from typing import Optional


class StorageKeyError(ValueError):
    """스토리지 키 처리 중 발생하는 모든 오류의 기본 클래스"""
    kind = "StorageKeyError"


class UnknownPrefix(StorageKeyError):
    """모듈/스토리지 prefix를 lookup table에서 찾을 수 없음"""
    kind = "UnknownPrefix"

    def __init__(self, prefix: str, reason: Optional[str] = None):
        self.prefix = prefix
        self.reason = reason or "prefix not found in lookup table"
        super().__init__(f"Unknown storage prefix {prefix!r}: {self.reason}")


class UnsupportedHasher(StorageKeyError):
    """키가 있는 스토리지에 concat 계열이 아닌 hasher가 선언됨"""
    kind = "UnsupportedHasher"

    def __init__(self, hasher, position: str, module_prefix: str = "", storage_prefix: str = ""):
        self.hasher = hasher
        self.position = position
        self.module_prefix = module_prefix
        self.storage_prefix = storage_prefix
        name = getattr(hasher, "value", hasher)
        super().__init__(
            f"{module_prefix}.{storage_prefix}: {position} uses non-concat hasher {name}"
        )


class TruncatedKey(StorageKeyError):
    """스토리지 키가 선언된 레이아웃보다 짧음"""
    kind = "TruncatedKey"

    def __init__(self, needed: int, available: int, segment: str):
        self.needed = needed
        self.available = available
        self.segment = segment
        super().__init__(
            f"Storage key truncated at {segment}: need {needed} hex chars, {available} left"
        )


class UnknownKeyLength(StorageKeyError):
    """DoubleMap key1 타입의 길이를 key-length table에서 찾을 수 없음

    테이블에 항목을 추가한 뒤 다시 시도하면 복구 가능하다.
    """
    kind = "UnknownKeyLength"

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Can not infer the length of key1 type {type_name!r}")


class InvalidStorageKey(StorageKeyError):
    """hex 문자열이 아닌 입력"""
    kind = "InvalidStorageKey"


class DuplicatePrefix(StorageKeyError):
    """lookup table 생성 중 같은 prefix가 두 번 나옴"""
    kind = "DuplicatePrefix"

    def __init__(self, prefix: str, first: str, second: str):
        self.prefix = prefix
        self.first = first
        self.second = second
        super().__init__(f"Duplicate storage prefix {prefix}: {first} and {second}")


class MetadataError(StorageKeyError):
    """메타데이터 문서를 읽거나 검증할 수 없음"""
    kind = "MetadataError"


class UnknownValueType(StorageKeyError):
    """값 디코더 레지스트리에 등록되지 않은 타입"""
    kind = "UnknownValueType"

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"No value decoder registered for {type_name!r}")


class ValueDecodeError(StorageKeyError):
    """등록된 디코더가 값을 해석하지 못함"""
    kind = "ValueDecodeError"


class ConfigError(StorageKeyError):
    """설정 파일이나 환경 변수가 잘못됨"""
    kind = "ConfigError"

# hashing.py
import hashlib
from enum import Enum

import xxhash

# prefix = twox_128(module) + twox_128(storage), 각각 32 hex
PREFIX_LENGTH = 32 * 2


class StorageHasher(str, Enum):
    """메타데이터에 선언되는 스토리지 hasher"""
    BLAKE2_128 = "Blake2_128"
    BLAKE2_256 = "Blake2_256"
    BLAKE2_128_CONCAT = "Blake2_128Concat"
    TWOX_128 = "Twox128"
    TWOX_256 = "Twox256"
    TWOX_64_CONCAT = "Twox64Concat"
    IDENTITY = "Identity"

    @classmethod
    def _missing_(cls, value):
        # "Blake2-128Concat", "twox_64_concat" 같은 표기도 허용
        if isinstance(value, str):
            wanted = value.replace("-", "").replace("_", "").lower()
            for member in cls:
                if member.value.replace("_", "").lower() == wanted:
                    return member
        return None


# 해시 출력 길이 (hex 문자 수)
DIGEST_LENGTHS = {
    StorageHasher.BLAKE2_128: 32,
    StorageHasher.BLAKE2_256: 32 * 2,
    StorageHasher.BLAKE2_128_CONCAT: 32,
    StorageHasher.TWOX_128: 32,
    StorageHasher.TWOX_256: 32 * 2,
    StorageHasher.TWOX_64_CONCAT: 16,
    StorageHasher.IDENTITY: 0,
}

CONCAT_HASHERS = frozenset({StorageHasher.BLAKE2_128_CONCAT, StorageHasher.TWOX_64_CONCAT})


def digest_length(hasher: StorageHasher) -> int:
    """hasher의 digest 길이 (hex)"""
    return DIGEST_LENGTHS[StorageHasher(hasher)]


def is_concat(hasher: StorageHasher) -> bool:
    """digest 뒤에 원본 키가 붙는 hasher인지"""
    return StorageHasher(hasher) in CONCAT_HASHERS


def _twox(data: bytes, rounds: int) -> bytes:
    return b"".join(
        xxhash.xxh64(data, seed=seed).intdigest().to_bytes(8, "little")
        for seed in range(rounds)
    )


def twox_64(data: bytes) -> bytes:
    """Two XX 64-bit hash"""
    return _twox(data, 1)


def twox_128(data: bytes) -> bytes:
    """Two XX 128-bit hash"""
    return _twox(data, 2)


def twox_256(data: bytes) -> bytes:
    """Two XX 256-bit hash"""
    return _twox(data, 4)


def blake2_128(data: bytes) -> bytes:
    """Blake2 128-bit hash"""
    return hashlib.blake2b(data, digest_size=16).digest()


def blake2_256(data: bytes) -> bytes:
    """Blake2 256-bit hash"""
    return hashlib.blake2b(data, digest_size=32).digest()


def blake2_128_concat(data: bytes) -> bytes:
    """Blake2 128-bit hash with concatenated data"""
    return blake2_128(data) + data


def twox_64_concat(data: bytes) -> bytes:
    """Two XX 64-bit hash with concatenated data"""
    return twox_64(data) + data


_HASH_FUNCTIONS = {
    StorageHasher.BLAKE2_128: blake2_128,
    StorageHasher.BLAKE2_256: blake2_256,
    StorageHasher.BLAKE2_128_CONCAT: blake2_128_concat,
    StorageHasher.TWOX_128: twox_128,
    StorageHasher.TWOX_256: twox_256,
    StorageHasher.TWOX_64_CONCAT: twox_64_concat,
    StorageHasher.IDENTITY: lambda data: data,
}


def hash_key(hasher: StorageHasher, data: bytes) -> bytes:
    """선언된 hasher로 키 바이트를 인코딩"""
    return _HASH_FUNCTIONS[StorageHasher(hasher)](data)


def storage_prefix(module_prefix: str, storage_name: str) -> str:
    """twox_128(module) + twox_128(storage) prefix (hex, 0x 없음)"""
    return (twox_128(module_prefix.encode()) + twox_128(storage_name.encode())).hex()

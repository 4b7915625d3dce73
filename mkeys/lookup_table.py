# lookup_table.py
import logging
from types import MappingProxyType
from typing import Dict, Iterator, Optional

from .errors import DuplicatePrefix
from .metadata import MetadataDocument, StorageDescriptor

logger = logging.getLogger(__name__)


class StoragePrefixLookupTable:
    """스토리지 prefix(hex) → StorageDescriptor 조회 테이블

    런타임 버전마다 한 번 만들고, 이후에는 읽기 전용으로 공유한다.
    런타임 업그레이드 시에는 새 테이블을 만들어 교체한다.
    """

    def __init__(self, entries: Dict[str, StorageDescriptor]):
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def build(cls, metadata: MetadataDocument) -> "StoragePrefixLookupTable":
        """메타데이터의 모든 스토리지 항목으로 테이블 생성"""
        entries: Dict[str, StorageDescriptor] = {}

        for descriptor in metadata.descriptors():
            prefix = descriptor.prefix()
            existing = entries.get(prefix)
            if existing is not None:
                # 덮어쓰지 않고 생성을 거부
                raise DuplicatePrefix(prefix, existing.qualified_name, descriptor.qualified_name)
            entries[prefix] = descriptor

        logger.info(f"스토리지 prefix 테이블 생성 완료: {len(entries)}개 항목")
        return cls(entries)

    def lookup(self, prefix: str) -> Optional[StorageDescriptor]:
        return self._entries.get(prefix)

    def prefixes(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, prefix) -> bool:
        return prefix in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def build_lookup_table(metadata: MetadataDocument) -> StoragePrefixLookupTable:
    return StoragePrefixLookupTable.build(metadata)

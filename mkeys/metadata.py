# metadata.py
"""디코딩된 런타임 메타데이터 문서 모델

바이너리 메타데이터 파싱은 외부 라이브러리가 담당하고, 여기서는 그 결과
(모듈 → 스토리지 항목 → 저장 형태)를 검증된 구조로 받는다.

    {"modules": [{"name": "System",
                  "storage_items": [{"name": "Account",
                                     "kind": {"type": "Map", "hasher": "Blake2_128Concat",
                                              "key_type": "T::AccountId",
                                              "value_type": "AccountInfo<T::Index, T::AccountData>"}}]}]}
"""
import json
import logging
from pathlib import Path
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import MetadataError
from .hashing import StorageHasher, storage_prefix as make_prefix

logger = logging.getLogger(__name__)


def _to_hasher(value):
    if isinstance(value, StorageHasher):
        return value
    try:
        return StorageHasher(value)
    except ValueError:
        raise ValueError(f"unknown storage hasher: {value!r}") from None


class PlainKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["Plain"] = "Plain"
    value_type: str = ""


class MapKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["Map"] = "Map"
    hasher: StorageHasher
    key_type: str
    value_type: str

    @field_validator("hasher", mode="before")
    @classmethod
    def check_hasher(cls, value):
        return _to_hasher(value)


class DoubleMapKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["DoubleMap"] = "DoubleMap"
    hasher1: StorageHasher
    key1_type: str
    hasher2: StorageHasher
    key2_type: str
    value_type: str

    @field_validator("hasher1", "hasher2", mode="before")
    @classmethod
    def check_hashers(cls, value):
        return _to_hasher(value)


StorageKind = Annotated[Union[PlainKind, MapKind, DoubleMapKind], Field(discriminator="type")]


class StorageItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: StorageKind


class ModuleMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    # 스토리지 prefix가 모듈 이름과 다를 수 있음
    prefix: Optional[str] = None
    storage_items: List[StorageItem] = Field(default_factory=list)

    @property
    def storage_prefix(self) -> str:
        return self.prefix or self.name


class StorageDescriptor(BaseModel):
    """하나의 스토리지 항목 (lookup table의 값)"""
    model_config = ConfigDict(frozen=True)

    module_prefix: str
    storage_prefix: str
    kind: StorageKind

    def prefix(self) -> str:
        return make_prefix(self.module_prefix, self.storage_prefix)

    @property
    def qualified_name(self) -> str:
        return f"{self.module_prefix}.{self.storage_prefix}"


class MetadataDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    modules: List[ModuleMetadata] = Field(default_factory=list)

    def descriptors(self):
        """모든 모듈의 모든 스토리지 항목을 StorageDescriptor로 순회"""
        for module in self.modules:
            for item in module.storage_items:
                yield StorageDescriptor(
                    module_prefix=module.storage_prefix,
                    storage_prefix=item.name,
                    kind=item.kind,
                )

    def double_map_key_types(self) -> List[Tuple[str, str]]:
        """모든 DoubleMap의 (key1 타입, key2 타입) 목록"""
        return [
            (descriptor.kind.key1_type, descriptor.kind.key2_type)
            for descriptor in self.descriptors()
            if isinstance(descriptor.kind, DoubleMapKind)
        ]


def parse_metadata(data) -> MetadataDocument:
    """dict 형태의 메타데이터를 검증"""
    try:
        return MetadataDocument.model_validate(data)
    except ValidationError as e:
        raise MetadataError(f"Invalid metadata document: {e}") from e


def load_metadata(path) -> MetadataDocument:
    """JSON 메타데이터 파일 로드"""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise MetadataError(f"Can not read metadata file {path}: {e}") from e

    metadata = parse_metadata(data)
    logger.debug(f"메타데이터 로드: {path} ({len(metadata.modules)} modules)")
    return metadata

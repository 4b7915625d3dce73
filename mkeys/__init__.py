from .errors import (
    DuplicatePrefix,
    InvalidStorageKey,
    StorageKeyError,
    TruncatedKey,
    UnknownKeyLength,
    UnknownPrefix,
    UnsupportedHasher,
)
from .hashing import PREFIX_LENGTH, StorageHasher, digest_length, storage_prefix
from .key_length import KeyLengthTable
from .lookup_table import StoragePrefixLookupTable, build_lookup_table
from .metadata import MetadataDocument, StorageDescriptor, load_metadata, parse_metadata
from .parser import (
    DoubleMapKey,
    MapKey,
    PlainKey,
    StorageKeyParser,
    TransparentStorageKey,
    parse_storage_key,
)
from .value_decoder import ValueDecoderRegistry

__version__ = "0.1.0"

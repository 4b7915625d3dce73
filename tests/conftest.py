"""Shared fixtures for storage key parser tests."""

from __future__ import annotations

import json

import pytest

from mkeys.key_length import KeyLengthTable
from mkeys.lookup_table import StoragePrefixLookupTable
from mkeys.metadata import parse_metadata
from tests.sample_metadata import SAMPLE_METADATA


@pytest.fixture
def metadata():
    return parse_metadata(SAMPLE_METADATA)


@pytest.fixture
def table(metadata):
    return StoragePrefixLookupTable.build(metadata)


@pytest.fixture
def key_lengths():
    return KeyLengthTable.default()


@pytest.fixture
def metadata_file(tmp_path):
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps(SAMPLE_METADATA), encoding="utf-8")
    return path

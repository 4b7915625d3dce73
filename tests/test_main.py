"""Unit tests for the command line entry point."""

from __future__ import annotations

import io
import json
import logging
import os

import pytest

from mkeys.main import main
from tests.sample_metadata import ACCOUNT_ID, AUTHORED_BLOCKS_KEY, SYSTEM_ACCOUNT_KEY


ENV_NAMES = ("MK_METADATA_PATH", "MK_KEY_LENGTH_TABLE_PATH", "MK_KEY_LENGTH_TABLE_VERSION", "MK_DEBUG_MODE")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    yield
    # --env-file writes straight into os.environ
    for name in ENV_NAMES:
        os.environ.pop(name, None)


def _lines(capsys) -> list:
    return [json.loads(line) for line in capsys.readouterr().out.splitlines()]


def test_main_parses_keys(metadata_file, capsys) -> None:
    exit_code = main(["--metadata", str(metadata_file), SYSTEM_ACCOUNT_KEY, AUTHORED_BLOCKS_KEY])

    first, second = _lines(capsys)
    assert exit_code == 0
    assert first["storage_prefix"] == "Account"
    assert first["storage_key"] == SYSTEM_ACCOUNT_KEY
    assert first["key"] == ACCOUNT_ID
    assert second["kind"] == "DoubleMap"
    assert second["storage_key"] == AUTHORED_BLOCKS_KEY
    assert second["key1"] == "00000000"


def test_main_reports_errors_per_key(metadata_file, capsys) -> None:
    exit_code = main(["--metadata", str(metadata_file), "00" * 32, SYSTEM_ACCOUNT_KEY])

    failed, parsed = _lines(capsys)
    assert exit_code == 1
    assert failed == {"storage_key": "00" * 32, "error": "UnknownPrefix", "message": failed["message"]}
    assert parsed["module_prefix"] == "System"
    assert parsed["storage_key"] == SYSTEM_ACCOUNT_KEY


def test_main_reads_keys_from_stdin(metadata_file, capsys, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(SYSTEM_ACCOUNT_KEY + "\n\n"))

    exit_code = main(["--metadata", str(metadata_file)])

    assert exit_code == 0
    assert len(_lines(capsys)) == 1


def test_main_metadata_from_env_file(metadata_file, tmp_path, capsys) -> None:
    env_file = tmp_path / ".env.mkeys"
    env_file.write_text(f"MK_METADATA_PATH={metadata_file}\n", encoding="utf-8")

    exit_code = main(["--env-file", str(env_file), SYSTEM_ACCOUNT_KEY])

    assert exit_code == 0
    assert _lines(capsys)[0]["value_type"] == "AccountInfo<T::Index, T::AccountData>"


def test_main_check_table(metadata_file, tmp_path, capsys) -> None:
    exit_code = main(["--metadata", str(metadata_file), "--check-table"])

    assert exit_code == 1
    assert _lines(capsys)[0]["missing"] == ["Kind"]

    lengths = tmp_path / "lengths.json"
    lengths.write_text(json.dumps({"T::AccountId": 64, "SessionIndex": 8, "EraIndex": 8, "Kind": 32}), encoding="utf-8")

    exit_code = main(["--metadata", str(metadata_file), "--key-lengths", str(lengths), "--check-table"])

    assert exit_code == 0
    assert _lines(capsys)[0] == {"version": "lengths", "missing": []}


def test_main_without_metadata(capsys) -> None:
    assert main([SYSTEM_ACCOUNT_KEY]) == 2


def test_main_logs_paths_from_arguments(metadata_file, tmp_path, caplog) -> None:
    """Settings summary should show the files given on the command line."""
    lengths = tmp_path / "lengths.json"
    lengths.write_text(json.dumps({"Kind": 32}), encoding="utf-8")
    caplog.set_level(logging.INFO, logger="mkeys")

    exit_code = main(["--metadata", str(metadata_file), "--key-lengths", str(lengths), SYSTEM_ACCOUNT_KEY])

    assert exit_code == 0
    assert f"메타데이터: {metadata_file}" in caplog.text
    assert f"key-length 테이블: {lengths}" in caplog.text
    assert "(없음)" not in caplog.text

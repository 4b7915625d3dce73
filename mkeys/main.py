#!/usr/bin/env python3
# main.py - 스토리지 키 파서 CLI
import argparse
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .config import Settings, load_key_length_table, print_settings
from .errors import StorageKeyError
from .lookup_table import StoragePrefixLookupTable
from .metadata import load_metadata
from .parser import StorageKeyParser

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description='Substrate 스토리지 키 파서')
    parser.add_argument('keys', nargs='*', help='파싱할 스토리지 키 (없으면 stdin에서 한 줄씩 읽음)')
    parser.add_argument('--metadata', help='디코딩된 메타데이터 JSON 파일')
    parser.add_argument('--key-lengths', help='DoubleMap key1 길이 테이블 JSON 파일')
    parser.add_argument('--env-file', help='추가로 로드할 .env 파일')
    parser.add_argument('--check-table', action='store_true',
                        help='key-length 테이블에 없는 DoubleMap key1 타입만 출력')
    parser.add_argument('--debug', action='store_true', help='디버그 모드 활성화')
    return parser.parse_args(argv)


def apply_args(current: Settings, args) -> Settings:
    """명령행 인자로 설정 덮어쓰기 (있는 경우)"""
    overrides = {}
    if args.metadata:
        overrides["METADATA_PATH"] = args.metadata
    if args.key_lengths:
        overrides["KEY_LENGTH_TABLE_PATH"] = args.key_lengths
    if args.debug:
        overrides["DEBUG_MODE"] = True
    return current.model_copy(update=overrides) if overrides else current


def setup_logging(current: Settings):
    # JSON 출력과 분리하기 위해 stderr 사용
    level = logging.DEBUG if current.DEBUG_MODE else getattr(logging, current.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )
    logging.getLogger().setLevel(level)


def read_keys(args) -> List[str]:
    if args.keys:
        return args.keys
    return [line.strip() for line in sys.stdin if line.strip()]


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    if args.env_file:
        load_dotenv(args.env_file)
    current = apply_args(Settings(), args)
    setup_logging(current)
    print_settings(current)

    if not current.METADATA_PATH:
        logger.error("메타데이터 파일이 지정되지 않았습니다 (--metadata 또는 MK_METADATA_PATH)")
        return 2

    try:
        metadata = load_metadata(current.METADATA_PATH)
        key_lengths = load_key_length_table(current)
    except StorageKeyError as e:
        logger.error(f"초기화 실패: {e}")
        return 2

    if args.check_table:
        missing = key_lengths.missing_types(metadata)
        print(json.dumps({"version": key_lengths.version, "missing": missing}, ensure_ascii=False))
        return 1 if missing else 0

    try:
        table = StoragePrefixLookupTable.build(metadata)
    except StorageKeyError as e:
        logger.error(f"lookup table 생성 실패: {e}")
        return 2

    parser = StorageKeyParser(table, key_lengths)
    failed = 0
    for storage_key in read_keys(args):
        try:
            result = {"storage_key": storage_key, **parser.parse(storage_key).to_dict()}
        except StorageKeyError as e:
            failed += 1
            result = {"storage_key": storage_key, "error": e.kind, "message": str(e)}
        print(json.dumps(result, ensure_ascii=False))

    if failed:
        logger.warning(f"{failed}개 키 파싱 실패")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

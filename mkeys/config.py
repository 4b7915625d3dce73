# config.py
import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from .key_length import KeyLengthTable

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # 입력 파일 (환경 변수에서 MK_ 접두사 사용)
    METADATA_PATH: Optional[str] = Field(default=None)
    KEY_LENGTH_TABLE_PATH: Optional[str] = Field(default=None)
    KEY_LENGTH_TABLE_VERSION: Optional[str] = Field(default=None)

    # 로깅
    LOG_LEVEL: str = Field(default="INFO")
    DEBUG_MODE: bool = Field(default=False)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "MK_"
        extra = "ignore"


# 싱글톤 설정 인스턴스
settings = Settings()


def print_settings(current: Optional[Settings] = None):
    """현재 설정 출력"""
    current = current or settings
    logger.info("=== 현재 설정 ===")
    logger.info(f"메타데이터: {current.METADATA_PATH or '(없음)'}")
    logger.info(f"key-length 테이블: {current.KEY_LENGTH_TABLE_PATH or '(기본값)'}")
    if current.KEY_LENGTH_TABLE_VERSION:
        logger.info(f"key-length 테이블 버전: {current.KEY_LENGTH_TABLE_VERSION}")
    logger.info(f"로그 레벨: {current.LOG_LEVEL}")
    logger.info(f"디버그 모드: {'활성화' if current.DEBUG_MODE else '비활성화'}")
    logger.info("================")


def load_key_length_table(current: Optional[Settings] = None) -> KeyLengthTable:
    """설정된 파일이 있으면 로드하고, 없으면 기본 테이블 사용"""
    current = current or settings
    if current.KEY_LENGTH_TABLE_PATH:
        return KeyLengthTable.from_json_file(
            current.KEY_LENGTH_TABLE_PATH, version=current.KEY_LENGTH_TABLE_VERSION
        )

    table = KeyLengthTable.default()
    if current.KEY_LENGTH_TABLE_VERSION:
        table = table.extend({}, version=current.KEY_LENGTH_TABLE_VERSION)
    return table

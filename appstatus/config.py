"""
appstatus/config.py - 클라이언트 및 출력 설정

boto3 client 생성 옵션과 리포트 출력 형식을 정의합니다.

Usage:
    from appstatus.config import ClientConfig, OutputFormat

    config = ClientConfig.from_env()
    fmt = OutputFormat.from_string("json")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from .exceptions import ConfigError

# Retry mode 타입 (botocore TypedDict와 호환)
RetryMode = Literal["legacy", "standard", "adaptive"]

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_MODE: RetryMode = "standard"
DEFAULT_CONNECT_TIMEOUT = 10  # 초
DEFAULT_READ_TIMEOUT = 30  # 초

ENV_PREFIX = "APPSTATUS_"


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(ENV_PREFIX + name, f"expected an integer, got {raw!r}", e) from e


@dataclass(frozen=True)
class ClientConfig:
    """boto3 client 설정

    트랜스포트 수준의 재시도와 타임아웃만 다루며, 래퍼 자체는 재시도하지 않습니다.

    Attributes:
        max_attempts: botocore 최대 시도 횟수
        retry_mode: botocore 재시도 모드
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_mode: RetryMode = DEFAULT_RETRY_MODE
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
    read_timeout: int = DEFAULT_READ_TIMEOUT

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """APPSTATUS_* 환경변수에서 설정 생성"""
        retry_mode = os.getenv(ENV_PREFIX + "RETRY_MODE") or DEFAULT_RETRY_MODE
        if retry_mode not in ("legacy", "standard", "adaptive"):
            raise ConfigError(ENV_PREFIX + "RETRY_MODE", f"unknown retry mode {retry_mode!r}")
        return cls(
            max_attempts=_int_from_env("MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            retry_mode=retry_mode,  # type: ignore[arg-type]
            connect_timeout=_int_from_env("CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
            read_timeout=_int_from_env("READ_TIMEOUT", DEFAULT_READ_TIMEOUT),
        )


class OutputFormat(Enum):
    """상태 리포트 출력 형식"""

    JSON = "json"
    HUMAN = "human"

    @classmethod
    def from_string(cls, format_str: str) -> "OutputFormat":
        """문자열에서 OutputFormat 생성

        Args:
            format_str: 형식 문자열 ("json" 또는 "human")

        Returns:
            OutputFormat 값
        """
        try:
            return cls(format_str.lower())
        except ValueError as e:
            raise ConfigError("format", f"unknown output format {format_str!r}", e) from e

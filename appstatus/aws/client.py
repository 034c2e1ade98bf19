"""
appstatus/aws/client.py - boto3 client 생성 헬퍼

ClientConfig의 재시도/타임아웃 설정이 적용된 boto3 client를 생성합니다.

Example:
    from appstatus.aws.client import get_client

    ec2 = get_client(session, "ec2", region_name="us-west-2")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from botocore.config import Config

from ..config import ClientConfig

if TYPE_CHECKING:
    import boto3


def build_config(client_config: ClientConfig | None = None) -> Config:
    """ClientConfig로부터 botocore Config 생성"""
    client_config = client_config or ClientConfig.from_env()
    return Config(
        retries={"max_attempts": client_config.max_attempts, "mode": client_config.retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=client_config.connect_timeout,
        read_timeout=client_config.read_timeout,
    )


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    client_config: ClientConfig | None = None,
    **kwargs: Any,
) -> Any:
    """설정이 적용된 boto3 client 생성

    Args:
        session: boto3 Session
        service_name: AWS 서비스 이름 (ec2, ecs, cloudwatch 등)
        region_name: 리전 (None이면 세션 기본값)
        client_config: 재시도/타임아웃 설정 (None이면 환경변수 기반)
        **kwargs: session.client()에 전달할 추가 인자

    Returns:
        boto3 client
    """
    config = build_config(client_config)

    # 기존 config가 있으면 병합
    if "config" in kwargs:
        existing = kwargs.pop("config")
        config = config.merge(existing)

    # cast to Any to bypass boto3-stubs Literal type requirements
    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )

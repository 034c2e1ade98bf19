"""
tests/conftest.py - pytest 공통 픽스처

AWS API 모킹과 테스트 헬퍼를 제공합니다.

Usage:
    def test_something(mock_ec2_client, moto_vpc):
        # mock_ec2_client: MagicMock EC2 client
        # moto_vpc: moto로 생성한 VPC/Subnet
        pass
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List
from unittest.mock import MagicMock

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

REGION = "us-west-2"


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정"""
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    for name in ("MAX_ATTEMPTS", "RETRY_MODE", "CONNECT_TIMEOUT", "READ_TIMEOUT"):
        monkeypatch.delenv(f"APPSTATUS_{name}", raising=False)


# =============================================================================
# AWS 모킹 픽스처
# =============================================================================


@pytest.fixture
def mock_ec2_client():
    """EC2 클라이언트 모킹 (페이지 응답은 각 테스트에서 paginate.return_value로 설정)"""
    mock_client = MagicMock()
    mock_client.get_paginator.return_value.paginate.return_value = []
    return mock_client


@pytest.fixture
def mock_ecs_client():
    """ECS 클라이언트 모킹"""
    mock_client = MagicMock()
    mock_client.get_paginator.return_value.paginate.return_value = [{"taskArns": []}]
    mock_client.describe_tasks.return_value = {"tasks": []}
    return mock_client


@pytest.fixture
def mock_cloudwatch_clients():
    """CloudWatch / Tagging 클라이언트 모킹"""
    cw = MagicMock()
    tagging = MagicMock()
    tagging.get_paginator.return_value.paginate.return_value = [{"ResourceTagMappingList": []}]
    cw.get_paginator.return_value.paginate.return_value = [{"MetricAlarms": [], "CompositeAlarms": []}]
    return cw, tagging


# =============================================================================
# 유틸리티 함수
# =============================================================================


def create_failing_pages(pages: List[Dict[str, Any]], error: Exception) -> Iterator[Dict[str, Any]]:
    """주어진 페이지를 반환한 뒤 예외를 발생시키는 paginate 결과 헬퍼"""
    yield from pages
    raise error


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    operation_name: str = "TestOperation",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        operation_name,
    )


# =============================================================================
# moto 통합
# =============================================================================


@pytest.fixture
def moto_vpc():
    """moto를 사용한 EC2 모킹

    VPC 하나에 퍼블릭 서브넷 1개, 프라이빗 서브넷 2개를 생성합니다.
    """
    import boto3
    from moto import mock_aws

    with mock_aws():
        session = boto3.Session(region_name=REGION)
        ec2 = session.client("ec2")

        vpc_id = ec2.create_vpc(CidrBlock="10.0.0.0/16")["Vpc"]["VpcId"]
        public = ec2.create_subnet(VpcId=vpc_id, CidrBlock="10.0.1.0/24")["Subnet"]["SubnetId"]
        ec2.modify_subnet_attribute(SubnetId=public, MapPublicIpOnLaunch={"Value": True})
        private = [
            ec2.create_subnet(VpcId=vpc_id, CidrBlock=cidr)["Subnet"]["SubnetId"]
            for cidr in ("10.0.2.0/24", "10.0.3.0/24")
        ]

        yield session, vpc_id, public, private


@pytest.fixture
def moto_session():
    """moto가 활성화된 boto3 Session"""
    import boto3
    from moto import mock_aws

    with mock_aws():
        yield boto3.Session(region_name=REGION)

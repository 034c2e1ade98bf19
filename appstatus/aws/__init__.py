"""
appstatus/aws - AWS 서비스 client 래퍼

주요 구성 요소:
- EC2: VPC/Subnet/Security Group ID 조회
- ECS: 서비스/태스크 상태 조회
- CloudWatch: 태그 기반 알람 상태 조회
- SessionProvider: 기본/AssumeRole 세션 생성
"""

from .client import get_client
from .cloudwatch import AlarmStatus, CloudWatch
from .ec2 import (
    EC2,
    FILTER_FOR_DEFAULT_VPC_SUBNETS,
    Filter,
    filter_for_private_subnets,
    filter_for_public_subnets,
    to_ec2_filters,
)
from .ecs import ECS, ServiceArn, ServiceStatus, TaskStatus
from .session import SessionProvider

__all__: list[str] = [
    "get_client",
    # EC2
    "EC2",
    "Filter",
    "FILTER_FOR_DEFAULT_VPC_SUBNETS",
    "filter_for_public_subnets",
    "filter_for_private_subnets",
    "to_ec2_filters",
    # ECS
    "ECS",
    "ServiceArn",
    "ServiceStatus",
    "TaskStatus",
    # CloudWatch
    "CloudWatch",
    "AlarmStatus",
    # Session
    "SessionProvider",
]

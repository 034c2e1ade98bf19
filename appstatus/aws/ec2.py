"""
appstatus/aws/ec2.py - EC2 네트워크 리소스 조회

VPC, Subnet, Security Group ID 목록을 botocore paginator로 끝까지 조회합니다.

Example:
    from appstatus.aws.ec2 import EC2, Filter, filter_for_public_subnets

    ec2 = EC2.from_session(session)
    vpc_ids = ec2.list_vpcs()
    public = ec2.list_vpc_subnets(vpc_ids[0], filter_for_public_subnets())
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import APICallError
from .client import get_client

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

DEFAULT_FOR_AZ_FILTER_NAME = "default-for-az"
VPC_ID_FILTER_NAME = "vpc-id"

# 태그 필터 이름 형식 (예: "tag:ecs-project")
TAG_FILTER_NAME = "tag:{}"


@dataclass(frozen=True)
class Filter:
    """EC2 describe 호출에 적용할 필터

    사용 가능한 필터 이름은 각 API 문서를 참고하세요.
    https://docs.aws.amazon.com/AWSEC2/latest/APIReference/API_DescribeSubnets.html

    Attributes:
        name: 필터 이름 (예: "vpc-id", "tag:Name")
        values: 필터 값 (list를 넘겨도 tuple로 저장)
    """

    name: str
    values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    @classmethod
    def tag(cls, key: str, *values: str) -> "Filter":
        """태그 필터 생성"""
        return cls(name=TAG_FILTER_NAME.format(key), values=values)


# 가용 영역의 기본 서브넷
FILTER_FOR_DEFAULT_VPC_SUBNETS = Filter(name=DEFAULT_FOR_AZ_FILTER_NAME, values=("true",))

# 모든 페이지 조회 후 원본 subnet 레코드에 순서대로 적용되는 후처리 필터
SubnetFilter = Callable[[list[dict[str, Any]]], list[dict[str, Any]]]


def filter_for_public_subnets() -> SubnetFilter:
    """MapPublicIpOnLaunch가 켜진 서브넷만 남기는 필터"""

    def _filter(subnets: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [s for s in subnets if s.get("MapPublicIpOnLaunch") is True]

    return _filter


def filter_for_private_subnets() -> SubnetFilter:
    """MapPublicIpOnLaunch가 꺼져 있거나 없는 서브넷만 남기는 필터"""

    def _filter(subnets: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [s for s in subnets if s.get("MapPublicIpOnLaunch") is not True]

    return _filter


def to_ec2_filters(filters: list[Filter] | tuple[Filter, ...]) -> list[dict[str, Any]]:
    """Filter 목록을 EC2 API의 Filters 파라미터 형식으로 변환

    Args:
        filters: Filter 목록 (비어 있으면 필터링 없음)

    Returns:
        [{"Name": ..., "Values": [...]}] 형식의 목록
    """
    return [{"Name": f.name, "Values": list(f.values)} for f in filters]


class EC2:
    """EC2 client 래퍼

    Args:
        client: boto3 EC2 client (테스트에서는 MagicMock 주입)
    """

    def __init__(self, client: Any):
        self._client = client

    @classmethod
    def from_session(cls, session: "boto3.Session", region_name: str | None = None) -> "EC2":
        """세션으로부터 EC2 래퍼 생성"""
        return cls(get_client(session, "ec2", region_name=region_name))

    def _pages(self, operation_name: str, operation: str, key: str, **params: Any) -> Iterator[list[dict[str, Any]]]:
        """botocore paginator로 페이지를 순차 조회

        실패 시 APICallError를 발생시키며, 이전 페이지 결과는 호출자에게 반환되지 않습니다.
        """
        paginator = self._client.get_paginator(operation_name)
        try:
            for page_number, page in enumerate(paginator.paginate(**params), start=1):
                items = page.get(key, [])
                logger.debug("%s: page %d returned %d items", operation, page_number, len(items))
                yield items
        except (ClientError, BotoCoreError) as e:
            raise APICallError.from_client_error("ec2", operation, e) from e

    def _collect(self, method: str, operation: str, key: str, **params: Any) -> list[dict[str, Any]]:
        results: list[dict[str, Any]] = []
        for items in self._pages(method, operation, key, **params):
            results.extend(items)
        return results

    def list_vpcs(self) -> list[str]:
        """모든 VPC ID 조회"""
        vpcs = self._collect("describe_vpcs", "describe VPCs", "Vpcs")
        return [vpc.get("VpcId", "") for vpc in vpcs]

    def list_vpc_subnets(self, vpc_id: str, *opts: SubnetFilter) -> list[str]:
        """VPC에 속한 서브넷 ID 조회

        Args:
            vpc_id: VPC ID
            *opts: 전체 결과에 순서대로 적용할 후처리 필터
                (filter_for_public_subnets, filter_for_private_subnets 등)

        Returns:
            서브넷 ID 목록
        """
        subnets = self._subnets(Filter(name=VPC_ID_FILTER_NAME, values=(vpc_id,)))
        for opt in opts:
            subnets = opt(subnets)
        return [subnet.get("SubnetId", "") for subnet in subnets]

    def subnet_ids(self, *filters: Filter) -> list[str]:
        """필터에 맞는 서브넷 ID 조회"""
        return [subnet.get("SubnetId", "") for subnet in self._subnets(*filters)]

    def public_subnet_ids(self, *filters: Filter) -> list[str]:
        """필터에 맞는 퍼블릭 서브넷 ID 조회"""
        subnets = filter_for_public_subnets()(self._subnets(*filters))
        return [subnet.get("SubnetId", "") for subnet in subnets]

    def security_groups(self, *filters: Filter) -> list[str]:
        """필터에 맞는 Security Group ID 조회

        다른 목록 조회와 동일하게 모든 페이지를 조회합니다.
        """
        groups = self._collect(
            "describe_security_groups",
            "describe security groups",
            "SecurityGroups",
            Filters=to_ec2_filters(filters),
        )
        return [sg.get("GroupId", "") for sg in groups]

    def _subnets(self, *filters: Filter) -> list[dict[str, Any]]:
        return self._collect(
            "describe_subnets",
            "describe subnets",
            "Subnets",
            Filters=to_ec2_filters(filters),
        )

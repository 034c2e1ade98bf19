"""
appstatus/aws/cloudwatch.py - CloudWatch 알람 조회

Resource Groups Tagging API로 태그가 일치하는 알람 ARN을 찾고,
DescribeAlarms로 각 알람의 상태를 조회합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import APICallError, ARNParseError
from .client import get_client

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

ALARM_RESOURCE_TYPE = "cloudwatch:alarm"
METRIC_ALARM_TYPE = "Metric"
COMPOSITE_ALARM_TYPE = "Composite"

# DescribeAlarms AlarmNames 파라미터 최대 개수
DESCRIBE_ALARMS_BATCH_SIZE = 100


@dataclass(frozen=True)
class AlarmStatus:
    """CloudWatch 알람 상태 요약"""

    arn: str
    name: str
    reason: str
    status: str
    type: str
    updated_times: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "arn": self.arn,
            "name": self.name,
            "reason": self.reason,
            "status": self.status,
            "type": self.type,
            "updatedTimes": self.updated_times,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AlarmStatus":
        return cls(
            arn=data.get("arn", ""),
            name=data.get("name", ""),
            reason=data.get("reason", ""),
            status=data.get("status", ""),
            type=data.get("type", ""),
            updated_times=data.get("updatedTimes", 0),
        )


def alarm_name_from_arn(arn: str) -> str:
    """arn:aws:cloudwatch:region:account:alarm:name 에서 알람 이름 추출"""
    parts = arn.split(":", 6)
    if len(parts) != 7 or parts[5] != "alarm":
        raise ARNParseError(arn, "alarm name")
    return parts[6]


def _alarm_status(alarm: dict[str, Any], alarm_type: str) -> AlarmStatus:
    updated: datetime | None = alarm.get("StateUpdatedTimestamp")
    return AlarmStatus(
        arn=alarm.get("AlarmArn", ""),
        name=alarm.get("AlarmName", ""),
        reason=alarm.get("StateReason", ""),
        status=alarm.get("StateValue", ""),
        type=alarm_type,
        updated_times=int(updated.timestamp()) if updated else 0,
    )


class CloudWatch:
    """CloudWatch + Resource Groups Tagging API client 래퍼

    Args:
        client: boto3 cloudwatch client
        tagging_client: boto3 resourcegroupstaggingapi client
    """

    def __init__(self, client: Any, tagging_client: Any):
        self._client = client
        self._tagging = tagging_client

    @classmethod
    def from_session(cls, session: "boto3.Session", region_name: str | None = None) -> "CloudWatch":
        return cls(
            get_client(session, "cloudwatch", region_name=region_name),
            get_client(session, "resourcegroupstaggingapi", region_name=region_name),
        )

    def get_alarms_with_tags(self, tags: dict[str, str]) -> list[AlarmStatus]:
        """모든 태그가 일치하는 알람의 상태 조회

        Args:
            tags: 태그 키/값 (모두 일치해야 함)

        Returns:
            AlarmStatus 목록 (Metric 알람 다음 Composite 알람 순)
        """
        alarm_names = [alarm_name_from_arn(arn) for arn in self._tagged_alarm_arns(tags)]
        logger.debug("found %d alarms tagged with %s", len(alarm_names), tags)

        alarms: list[AlarmStatus] = []
        for i in range(0, len(alarm_names), DESCRIBE_ALARMS_BATCH_SIZE):
            alarms.extend(self._describe_alarms(alarm_names[i : i + DESCRIBE_ALARMS_BATCH_SIZE]))
        return alarms

    def _tagged_alarm_arns(self, tags: dict[str, str]) -> list[str]:
        tag_filters = [{"Key": key, "Values": [value]} for key, value in tags.items()]
        arns: list[str] = []
        try:
            paginator = self._tagging.get_paginator("get_resources")
            for page in paginator.paginate(ResourceTypeFilters=[ALARM_RESOURCE_TYPE], TagFilters=tag_filters):
                arns.extend(r.get("ResourceARN", "") for r in page.get("ResourceTagMappingList", []))
        except (ClientError, BotoCoreError) as e:
            raise APICallError.from_client_error("tagging", "get resources", e) from e
        return arns

    def _describe_alarms(self, alarm_names: list[str]) -> list[AlarmStatus]:
        metric: list[AlarmStatus] = []
        composite: list[AlarmStatus] = []
        try:
            paginator = self._client.get_paginator("describe_alarms")
            for page in paginator.paginate(AlarmNames=alarm_names, AlarmTypes=["MetricAlarm", "CompositeAlarm"]):
                metric.extend(_alarm_status(a, METRIC_ALARM_TYPE) for a in page.get("MetricAlarms", []))
                composite.extend(_alarm_status(a, COMPOSITE_ALARM_TYPE) for a in page.get("CompositeAlarms", []))
        except (ClientError, BotoCoreError) as e:
            raise APICallError.from_client_error("cloudwatch", "describe CloudWatch alarms", e) from e
        return metric + composite

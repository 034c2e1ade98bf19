"""
appstatus/aws/ecs.py - ECS 서비스/태스크 조회

서비스 ARN 파싱, 서비스 상태 및 서비스에 속한 태스크 상태를 조회합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import APICallError, AppStatusError, ARNParseError
from .client import get_client

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

# DescribeTasks 한 번에 조회 가능한 최대 태스크 수
DESCRIBE_TASKS_BATCH_SIZE = 100


def _epoch(value: datetime | None) -> int:
    return int(value.timestamp()) if value else 0


def _arn_resource(arn: str) -> str:
    # arn:partition:service:region:account-id:resource
    parts = arn.split(":", 5)
    if len(parts) != 6 or parts[0] != "arn":
        raise ARNParseError(arn, "ARN")
    return parts[5]


class ServiceArn(str):
    """ECS 서비스 ARN

    arn:aws:ecs:us-west-2:123456789012:service/my-cluster/my-service
    """

    def _resource_parts(self) -> list[str]:
        resource = _arn_resource(str(self))
        parts = resource.split("/")
        if len(parts) != 3 or parts[0] != "service":
            raise ARNParseError(str(self), "resource")
        return parts

    def cluster_name(self) -> str:
        return self._resource_parts()[1]

    def service_name(self) -> str:
        return self._resource_parts()[2]


def task_id(task_arn: str) -> str:
    """태스크 ARN에서 태스크 ID 추출

    task/<id> 와 task/<cluster>/<id> 형식을 모두 지원합니다.
    """
    parts = _arn_resource(task_arn).split("/")
    if len(parts) < 2 or parts[0] != "task" or not parts[-1]:
        raise ARNParseError(task_arn, "task ID")
    return parts[-1]


@dataclass(frozen=True)
class ServiceStatus:
    """ECS 서비스 상태 요약"""

    desired_count: int
    running_count: int
    status: str
    last_deployment_at: int
    task_definition: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "desiredCount": self.desired_count,
            "runningCount": self.running_count,
            "status": self.status,
            "lastDeploymentAt": self.last_deployment_at,
            "taskDefinition": self.task_definition,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServiceStatus":
        return cls(
            desired_count=data.get("desiredCount", 0),
            running_count=data.get("runningCount", 0),
            status=data.get("status", ""),
            last_deployment_at=data.get("lastDeploymentAt", 0),
            task_definition=data.get("taskDefinition", ""),
        )


@dataclass(frozen=True)
class Image:
    """컨테이너 이미지 (ID와 sha256 접두어를 제거한 digest)"""

    id: str
    digest: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "digest": self.digest}


@dataclass(frozen=True)
class TaskStatus:
    """ECS 태스크 상태 요약

    시간 값은 epoch 초이며 0은 미설정을 의미합니다.
    """

    health: str
    id: str
    images: tuple[Image, ...] = ()
    last_status: str = ""
    started_at: int = 0
    stopped_at: int = 0
    stopped_reason: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "images", tuple(self.images))

    def to_dict(self) -> dict[str, Any]:
        return {
            "health": self.health,
            "id": self.id,
            "images": [image.to_dict() for image in self.images],
            "lastStatus": self.last_status,
            "startedAt": self.started_at,
            "stoppedAt": self.stopped_at,
            "stoppedReason": self.stopped_reason,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskStatus":
        return cls(
            health=data.get("health", ""),
            id=data.get("id", ""),
            images=tuple(Image(id=i.get("id", ""), digest=i.get("digest", "")) for i in data.get("images") or []),
            last_status=data.get("lastStatus", ""),
            started_at=data.get("startedAt", 0),
            stopped_at=data.get("stoppedAt", 0),
            stopped_reason=data.get("stoppedReason", ""),
        )


class Service:
    """DescribeServices 응답의 서비스 레코드 래퍼"""

    def __init__(self, data: dict[str, Any]):
        self.data = data

    @property
    def service_name(self) -> str:
        return self.data.get("serviceName", "")

    def service_status(self) -> ServiceStatus:
        """PRIMARY 배포(첫 번째 deployment) 기준 상태 요약"""
        deployments = self.data.get("deployments") or [{}]
        primary = deployments[0]
        return ServiceStatus(
            desired_count=self.data.get("desiredCount", 0),
            running_count=self.data.get("runningCount", 0),
            status=self.data.get("status", ""),
            last_deployment_at=_epoch(primary.get("updatedAt")),
            task_definition=primary.get("taskDefinition", ""),
        )


class Task:
    """DescribeTasks 응답의 태스크 레코드 래퍼"""

    def __init__(self, data: dict[str, Any]):
        self.data = data

    @property
    def task_arn(self) -> str:
        return self.data.get("taskArn", "")

    def task_status(self) -> TaskStatus:
        images = []
        for container in self.data.get("containers", []):
            digest = container.get("imageDigest", "")
            # sha256:abcdef... -> abcdef...
            images.append(Image(id=container.get("image", ""), digest=digest.split(":", 1)[-1]))
        stopped_at = self.data.get("stoppedAt")
        return TaskStatus(
            health=self.data.get("healthStatus", ""),
            id=task_id(self.task_arn),
            images=images,
            last_status=self.data.get("lastStatus", ""),
            started_at=_epoch(self.data.get("startedAt")),
            stopped_at=_epoch(stopped_at),
            stopped_reason=self.data.get("stoppedReason", "") if stopped_at else "",
        )


class ECS:
    """ECS client 래퍼"""

    def __init__(self, client: Any):
        self._client = client

    @classmethod
    def from_session(cls, session: "boto3.Session", region_name: str | None = None) -> "ECS":
        return cls(get_client(session, "ecs", region_name=region_name))

    def service(self, cluster_name: str, service_name: str) -> Service:
        """클러스터의 서비스 조회"""
        try:
            response = self._client.describe_services(cluster=cluster_name, services=[service_name])
        except (ClientError, BotoCoreError) as e:
            raise APICallError.from_client_error("ecs", f"describe service {service_name}", e) from e
        for svc in response.get("services", []):
            if svc.get("serviceName") == service_name:
                return Service(svc)
        raise AppStatusError(f"cannot find service {service_name}")

    def service_tasks(self, cluster_name: str, service_name: str) -> list[Task]:
        """서비스에 속한 실행 중인 태스크 조회

        ListTasks paginator로 모든 태스크 ARN을 모은 뒤 DescribeTasks를 배치로 호출합니다.
        """
        task_arns: list[str] = []
        try:
            paginator = self._client.get_paginator("list_tasks")
            for page in paginator.paginate(cluster=cluster_name, serviceName=service_name):
                task_arns.extend(page.get("taskArns", []))
        except (ClientError, BotoCoreError) as e:
            raise APICallError.from_client_error("ecs", "list running tasks", e) from e

        logger.debug("service %s has %d tasks", service_name, len(task_arns))
        tasks: list[Task] = []
        for i in range(0, len(task_arns), DESCRIBE_TASKS_BATCH_SIZE):
            batch = task_arns[i : i + DESCRIBE_TASKS_BATCH_SIZE]
            try:
                response = self._client.describe_tasks(cluster=cluster_name, tasks=batch)
            except (ClientError, BotoCoreError) as e:
                raise APICallError.from_client_error("ecs", "describe running tasks", e) from e
            tasks.extend(Task(t) for t in response.get("tasks", []))
        return tasks

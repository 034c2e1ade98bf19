"""
appstatus/describe/status.py - 애플리케이션 상태 리포트

ECS 서비스 상태, 서비스의 태스크 상태, 애플리케이션 태그가 붙은 CloudWatch 알람을
하나의 리포트로 합치고 JSON 또는 사람이 읽는 표 형식으로 렌더링합니다.

Usage:
    from appstatus.describe import AppStatus

    status = AppStatus.from_names("my-project", "test", "frontend")
    desc = status.describe()
    print(desc.human_string())
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from rich.padding import Padding
from rich.table import Table
from rich.text import Text

from ..aws.cloudwatch import AlarmStatus, CloudWatch
from ..aws.ecs import ECS, ServiceArn, ServiceStatus, Task, TaskStatus
from ..aws.session import SessionProvider
from ..config import OutputFormat
from ..console import get_render_console, status_text
from ..deploy import app_tags
from ..exceptions import AppStatusError, DescribeError
from ..store import Store
from ..timeutil import relative_time
from .app import AppDescriber, environment_session

logger = logging.getLogger(__name__)

SHORT_TASK_ID_LENGTH = 8
SHORT_IMAGE_DIGEST_LENGTH = 8

SECTION_SERVICE_STATUS = "Service Status"
SECTION_LAST_DEPLOYMENT = "Last Deployment"
SECTION_TASK_STATUS = "Task Status"
SECTION_ALARMS = "Alarms"

# 표 들여쓰기 칸 수
TABLE_INDENT = 2
# 표 너비 측정 시 상한 (실제 렌더링 폭은 측정값으로 결정)
MAX_MEASURE_WIDTH = 1_000_000


class ServiceArnGetter(Protocol):
    def get_service_arn(self) -> ServiceArn: ...


class ECSServiceGetter(Protocol):
    def service(self, cluster_name: str, service_name: str) -> Any: ...

    def service_tasks(self, cluster_name: str, service_name: str) -> list[Task]: ...


class AlarmStatusGetter(Protocol):
    def get_alarms_with_tags(self, tags: dict[str, str]) -> list[AlarmStatus]: ...


def _table(*headers: str, show_header: bool = True) -> Table:
    table = Table(box=None, show_header=show_header, header_style="", pad_edge=False, padding=(0, 1))
    for header in headers:
        table.add_column(header, no_wrap=True)
    return table


@dataclass(frozen=True)
class AppStatusDesc:
    """애플리케이션 상태 리포트 (읽기 전용 스냅샷)"""

    service: ServiceStatus
    tasks: tuple[TaskStatus, ...] = ()
    alarms: tuple[AlarmStatus, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tasks", tuple(self.tasks))
        object.__setattr__(self, "alarms", tuple(self.alarms))

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service.to_dict(),
            "tasks": [task.to_dict() for task in self.tasks],
            "alarms": [alarm.to_dict() for alarm in self.alarms],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppStatusDesc":
        """json_string() 출력을 파싱한 딕셔너리로부터 복원"""
        return cls(
            service=ServiceStatus.from_dict(data.get("service") or {}),
            tasks=tuple(TaskStatus.from_dict(t) for t in data.get("tasks") or []),
            alarms=tuple(AlarmStatus.from_dict(a) for a in data.get("alarms") or []),
        )

    def json_string(self) -> str:
        """JSON 문자열 (키 순서 고정, 끝에 개행 포함)"""
        try:
            return json.dumps(self.to_dict()) + "\n"
        except (TypeError, ValueError) as e:
            raise AppStatusError("marshal application status", e) from e

    def human_string(self, color: bool = True, now: datetime | None = None) -> str:
        """사람이 읽는 형식의 리포트

        Service Status, Last Deployment, Task Status, Alarms 섹션을
        목록이 비어 있어도 항상 이 순서로 출력합니다.
        셀 내용은 잘리지 않으며, 가장 넓은 표에 맞춰 렌더링 폭을 늘립니다.

        Args:
            color: False이면 ANSI 스타일 없이 출력
            now: 상대 시간 계산 기준 시각 (테스트용)
        """
        svc = self.service

        line = Text("  ")
        line.append_text(status_text(svc.status))
        line.append(
            f" {svc.running_count} / {svc.desired_count} running tasks"
            f" ({svc.desired_count - svc.running_count} pending)"
        )

        deployment = _table("", "", show_header=False)
        deployment.add_row("Updated At", _since(svc.last_deployment_at, now))
        deployment.add_row("Task Definition", svc.task_definition)

        tasks = _table("ID", "Image Digest", "Last Status", "Health Status", "Started At", "Stopped At")
        for task in self.tasks:
            tasks.add_row(*_task_row(task, now))

        alarms = _table("Name", "Health", "Last Updated", "Reason")
        for alarm in self.alarms:
            alarms.add_row(alarm.name, alarm.status, _since(alarm.updated_times, now), alarm.reason)

        sections = [
            (SECTION_SERVICE_STATUS, line),
            (SECTION_LAST_DEPLOYMENT, _indent(deployment)),
            (SECTION_TASK_STATUS, _indent(tasks)),
            (SECTION_ALARMS, _indent(alarms)),
        ]

        console = get_render_console(color)
        unbounded = console.options.update_width(MAX_MEASURE_WIDTH)
        console.width = max(
            console.width,
            *(console.measure(body, options=unbounded).maximum for _, body in sections),
        )

        for i, (title, body) in enumerate(sections):
            if i:
                console.print()
            console.print(Text(title, style="bold"))
            console.print()
            console.print(body)

        output = console.file.getvalue()  # type: ignore[attr-defined]
        # 표의 마지막 열 패딩으로 생기는 줄 끝 공백 제거
        return "\n".join(row.rstrip() for row in output.split("\n"))


def _indent(table: Table) -> Padding:
    return Padding(table, (0, 0, 0, TABLE_INDENT), expand=False)


def _since(epoch_seconds: int, now: datetime | None) -> str:
    """epoch 초를 상대 시간으로 변환 (0은 미설정이므로 "-")"""
    return relative_time(epoch_seconds, now) if epoch_seconds else "-"


def _task_row(task: TaskStatus, now: datetime | None) -> tuple[str, ...]:
    digests = ",".join(image.digest[:SHORT_IMAGE_DIGEST_LENGTH] for image in task.images)
    return (
        task.id[:SHORT_TASK_ID_LENGTH],
        digests,
        task.last_status,
        task.health,
        _since(task.started_at, now),
        _since(task.stopped_at, now),
    )


def render(desc: AppStatusDesc, fmt: OutputFormat, color: bool = True) -> str:
    """출력 형식에 맞게 리포트 렌더링"""
    if fmt is OutputFormat.JSON:
        return desc.json_string()
    return desc.human_string(color=color)


class AppStatus:
    """애플리케이션 상태 조회기

    Args:
        project_name: 프로젝트 이름
        env_name: 환경 이름
        app_name: 애플리케이션 이름
        describer: 서비스 ARN 조회기
        ecs_svc: ECS 서비스/태스크 조회기
        cw_svc: CloudWatch 알람 조회기
    """

    def __init__(
        self,
        project_name: str,
        env_name: str,
        app_name: str,
        describer: ServiceArnGetter,
        ecs_svc: ECSServiceGetter,
        cw_svc: AlarmStatusGetter,
    ):
        self.project_name = project_name
        self.env_name = env_name
        self.app_name = app_name
        self.describer = describer
        self.ecs_svc = ecs_svc
        self.cw_svc = cw_svc

    @classmethod
    def from_names(
        cls,
        project_name: str,
        env_name: str,
        app_name: str,
        store: Store | None = None,
        provider: SessionProvider | None = None,
    ) -> "AppStatus":
        """스토어의 환경 정보로 세션을 만들어 ECS/CloudWatch 조회기를 구성"""
        session = environment_session(project_name, env_name, store, provider)
        describer = AppDescriber.from_session(project_name, env_name, app_name, session)
        return cls(
            project_name=project_name,
            env_name=env_name,
            app_name=app_name,
            describer=describer,
            ecs_svc=ECS.from_session(session),
            cw_svc=CloudWatch.from_session(session),
        )

    def describe(self) -> AppStatusDesc:
        """서비스, 태스크, 알람 상태를 조회해 리포트 생성

        어느 단계든 실패하면 DescribeError를 발생시키며 부분 리포트는 반환하지 않습니다.
        """
        try:
            service_arn = self.describer.get_service_arn()
        except AppStatusError as e:
            raise DescribeError("get service ARN", e) from e
        try:
            cluster_name = service_arn.cluster_name()
        except AppStatusError as e:
            raise DescribeError("get cluster name", e) from e
        try:
            service_name = service_arn.service_name()
        except AppStatusError as e:
            raise DescribeError("get service name", e) from e

        try:
            service = self.ecs_svc.service(cluster_name, service_name)
        except AppStatusError as e:
            raise DescribeError(f"get ECS service {service_name}", e) from e
        try:
            tasks = self.ecs_svc.service_tasks(cluster_name, service_name)
        except AppStatusError as e:
            raise DescribeError(f"get ECS tasks for service {service_name}", e) from e

        task_statuses = []
        for task in tasks:
            try:
                task_statuses.append(task.task_status())
            except AppStatusError as e:
                raise DescribeError(f"get status for task {task.task_arn}", e) from e

        try:
            alarms = self.cw_svc.get_alarms_with_tags(app_tags(self.project_name, self.env_name, self.app_name))
        except AppStatusError as e:
            raise DescribeError("get CloudWatch alarms", e) from e

        logger.debug(
            "described %s/%s/%s: %d tasks, %d alarms",
            self.project_name,
            self.env_name,
            self.app_name,
            len(task_statuses),
            len(alarms),
        )
        return AppStatusDesc(
            service=service.service_status(),
            tasks=task_statuses,
            alarms=alarms,
        )

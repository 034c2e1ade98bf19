"""
appstatus/describe/app.py - 애플리케이션 스택 조회

애플리케이션 CloudFormation 스택에서 ECS 서비스 ARN을 찾습니다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from ..aws.client import get_client
from ..aws.ecs import ServiceArn
from ..aws.session import SessionProvider
from ..deploy import ECS_SERVICE_RESOURCE_TYPE, stack_name_for_app
from ..exceptions import APICallError, AppStatusError
from ..store import Store

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)


def environment_session(
    project_name: str,
    env_name: str,
    store: Store | None = None,
    provider: SessionProvider | None = None,
) -> boto3.Session:
    """환경의 manager role을 assume한 세션 생성

    스토어 연결, 환경 조회, role assume 중 어느 단계에서 실패했는지 메시지 접두어로 구분합니다.
    """
    provider = provider or SessionProvider()
    if store is None:
        try:
            store = Store.from_session(provider.default())
        except (ClientError, BotoCoreError) as e:
            raise AppStatusError("connect to store", e) from e
    try:
        env = store.get_environment(project_name, env_name)
    except AppStatusError as e:
        raise AppStatusError(f"get environment {env_name}", e) from e
    try:
        return provider.from_role(env.manager_role_arn, env.region)
    except AppStatusError as e:
        raise AppStatusError(f"session for role {env.manager_role_arn} and region {env.region}", e) from e


class AppDescriber:
    """애플리케이션 스택 리소스 조회기

    Args:
        project_name: 프로젝트 이름
        env_name: 환경 이름
        app_name: 애플리케이션 이름
        cfn_client: boto3 cloudformation client
    """

    def __init__(self, project_name: str, env_name: str, app_name: str, cfn_client: Any):
        self.project_name = project_name
        self.env_name = env_name
        self.app_name = app_name
        self._cfn = cfn_client

    @classmethod
    def from_names(
        cls,
        project_name: str,
        env_name: str,
        app_name: str,
        store: Store | None = None,
        provider: SessionProvider | None = None,
    ) -> "AppDescriber":
        """스토어의 환경 정보로 manager role 세션을 만들어 조회기 생성"""
        session = environment_session(project_name, env_name, store, provider)
        return cls.from_session(project_name, env_name, app_name, session)

    @classmethod
    def from_session(cls, project_name: str, env_name: str, app_name: str, session: boto3.Session) -> "AppDescriber":
        return cls(project_name, env_name, app_name, get_client(session, "cloudformation"))

    @property
    def stack_name(self) -> str:
        return stack_name_for_app(self.project_name, self.env_name, self.app_name)

    def stack_resources(self) -> list[dict[str, Any]]:
        """애플리케이션 스택의 리소스 목록"""
        try:
            response = self._cfn.describe_stack_resources(StackName=self.stack_name)
        except (ClientError, BotoCoreError) as e:
            raise APICallError.from_client_error("cloudformation", f"describe resources for stack {self.stack_name}", e) from e
        return response.get("StackResources", [])

    def get_service_arn(self) -> ServiceArn:
        """스택의 ECS 서비스 리소스 ARN 조회"""
        for resource in self.stack_resources():
            if resource.get("ResourceType") == ECS_SERVICE_RESOURCE_TYPE:
                logger.debug("found service %s in stack %s", resource.get("PhysicalResourceId"), self.stack_name)
                return ServiceArn(resource.get("PhysicalResourceId", ""))
        raise AppStatusError(f"cannot find service ARN in stack {self.stack_name}")

"""
appstatus/store.py - 프로젝트 환경 메타데이터 조회 (SSM Parameter Store)

환경 정보는 /ecs-cli-v2/<project>/environments/<env> 파라미터에 JSON으로 저장되어 있습니다.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from .aws.client import get_client
from .exceptions import APICallError, ConfigError, EnvironmentNotFoundError, is_not_found

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

ENVIRONMENT_PATH_FORMAT = "/ecs-cli-v2/{project}/environments/{env}"


@dataclass(frozen=True)
class Environment:
    """배포 환경 메타데이터"""

    project: str
    name: str
    region: str = ""
    account_id: str = ""
    prod: bool = False
    registry_url: str = ""
    execution_role_arn: str = ""
    manager_role_arn: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Environment":
        return cls(
            project=data.get("project", ""),
            name=data.get("name", ""),
            region=data.get("region", ""),
            account_id=data.get("accountID", ""),
            prod=bool(data.get("prod", False)),
            registry_url=data.get("registryURL", ""),
            execution_role_arn=data.get("executionRoleARN", ""),
            manager_role_arn=data.get("managerRoleARN", ""),
        )


class Store:
    """SSM Parameter Store 기반 읽기 전용 스토어"""

    def __init__(self, client: Any):
        self._client = client

    @classmethod
    def from_session(cls, session: "boto3.Session") -> "Store":
        return cls(get_client(session, "ssm"))

    def get_environment(self, project_name: str, env_name: str) -> Environment:
        """프로젝트의 환경 조회

        Raises:
            EnvironmentNotFoundError: 파라미터가 없는 경우
            APICallError: 그 외 SSM 호출 실패
        """
        path = ENVIRONMENT_PATH_FORMAT.format(project=project_name, env=env_name)
        try:
            response = self._client.get_parameter(Name=path)
        except ClientError as e:
            if is_not_found(e):
                raise EnvironmentNotFoundError(project_name, env_name, e) from e
            raise APICallError.from_client_error("ssm", f"get environment {env_name} in project {project_name}", e) from e
        except BotoCoreError as e:
            raise APICallError.from_client_error("ssm", f"get environment {env_name} in project {project_name}", e) from e

        try:
            data = json.loads(response["Parameter"]["Value"])
        except (KeyError, ValueError) as e:
            raise ConfigError(path, f"read environment {env_name}", e) from e
        logger.debug("loaded environment %s/%s", project_name, env_name)
        return Environment.from_dict(data)

"""
appstatus/aws/session.py - boto3 세션 생성

기본 자격 증명 체인 세션과 IAM Role을 assume한 세션을 제공합니다.
"""

from __future__ import annotations

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import ClientConfig
from ..exceptions import APICallError
from .client import get_client

logger = logging.getLogger(__name__)

ROLE_SESSION_NAME = "aws-app-status"


class SessionProvider:
    """boto3 Session 공급자

    Args:
        client_config: 세션 생성 시 사용하는 STS client 설정
    """

    def __init__(self, client_config: ClientConfig | None = None):
        self._client_config = client_config

    def default(self, region: str | None = None) -> boto3.Session:
        """기본 자격 증명 체인(환경변수, 프로파일 등)을 사용하는 세션"""
        return boto3.Session(region_name=region)

    def from_role(self, role_arn: str, region: str) -> boto3.Session:
        """role_arn을 assume한 임시 자격 증명 세션

        Args:
            role_arn: assume할 IAM Role ARN
            region: 세션 기본 리전

        Returns:
            임시 자격 증명이 설정된 boto3 Session
        """
        sts = get_client(self.default(region), "sts", region_name=region, client_config=self._client_config)
        try:
            creds = sts.assume_role(RoleArn=role_arn, RoleSessionName=ROLE_SESSION_NAME)["Credentials"]
        except (ClientError, BotoCoreError) as e:
            raise APICallError.from_client_error("sts", f"assume role {role_arn}", e) from e
        logger.debug("assumed role %s in %s", role_arn, region)
        return boto3.Session(
            aws_access_key_id=creds["AccessKeyId"],
            aws_secret_access_key=creds["SecretAccessKey"],
            aws_session_token=creds["SessionToken"],
            region_name=region,
        )

"""
appstatus/exceptions.py - 통합 예외 계층 구조

리소스 조회와 상태 리포트 생성 중 발생하는 예외 클래스들을 정의합니다.
모든 예외는 실패한 작업을 나타내는 짧은 접두어와 원인 예외를 함께 보관합니다.

예외 계층 구조:
    AppStatusError (베이스)
    ├── APICallError (AWS API 호출 실패)
    ├── DescribeError (상태 조회 단계 실패)
    ├── ARNParseError (ARN 파싱 실패)
    └── ConfigError (설정/스토어 관련)
        └── EnvironmentNotFoundError

Usage:
    from appstatus.exceptions import APICallError

    try:
        response = ec2.describe_subnets(Filters=filters)
    except ClientError as e:
        raise APICallError.from_client_error("ec2", "describe subnets", e) from e
"""

from typing import Any, Dict, Optional

NOT_FOUND_CODES = {
    "ResourceNotFoundException",
    "NotFoundException",
    "ParameterNotFound",
    "ClusterNotFoundException",
    "ServiceNotFoundException",
}

# =============================================================================
# 베이스 예외
# =============================================================================


class AppStatusError(Exception):
    """aws-app-status 기본 예외 클래스

    Attributes:
        message: 실패한 작업을 나타내는 메시지 (예: "describe subnets")
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# AWS API 호출 관련 예외
# =============================================================================


class APICallError(AppStatusError):
    """AWS API 호출 관련 예외

    boto3/botocore의 ClientError를 래핑합니다.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(operation, cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
            }
        )

    @classmethod
    def from_client_error(
        cls,
        service: str,
        operation: str,
        client_error: Exception,
    ) -> "APICallError":
        """botocore.exceptions.ClientError로부터 생성

        Args:
            service: AWS 서비스 이름
            operation: 실패한 작업 설명 (에러 메시지 접두어)
            client_error: 원인 예외

        Returns:
            APICallError 인스턴스
        """
        error_code = None
        if hasattr(client_error, "response"):
            error_code = client_error.response.get("Error", {}).get("Code")

        return cls(
            service=service,
            operation=operation,
            error_code=error_code,
            cause=client_error,
        )


# =============================================================================
# 상태 조회 관련 예외
# =============================================================================


class DescribeError(AppStatusError):
    """상태 리포트 생성 단계 실패

    어느 단계에서 실패했는지 step에 기록합니다.
    """

    def __init__(self, step: str, cause: Optional[Exception] = None):
        super().__init__(step, cause)
        self.step = step
        self.details["step"] = step


class ARNParseError(AppStatusError):
    """ARN 파싱 실패"""

    def __init__(self, arn: str, reason: str):
        super().__init__(f"cannot parse {reason} for ARN {arn}")
        self.arn = arn
        self.reason = reason
        self.details["arn"] = arn


# =============================================================================
# 설정 관련 예외
# =============================================================================


class ConfigError(AppStatusError):
    """설정 관련 예외"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause)
        self.config_key = key
        self.details["config_key"] = key


class EnvironmentNotFoundError(ConfigError):
    """스토어에 환경이 등록되어 있지 않음"""

    def __init__(self, project_name: str, env_name: str, cause: Optional[Exception] = None):
        super().__init__(
            key=f"{project_name}/{env_name}",
            message=f"couldn't find environment {env_name} in the project {project_name}",
            cause=cause,
        )
        self.project_name = project_name
        self.env_name = env_name


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def is_not_found(error: Exception) -> bool:
    """리소스를 찾을 수 없는 오류인지 확인

    Args:
        error: 확인할 예외

    Returns:
        리소스 없음 오류이면 True
    """
    if isinstance(error, APICallError):
        return error.error_code in NOT_FOUND_CODES

    if hasattr(error, "response"):
        error_code = error.response.get("Error", {}).get("Code", "")
        return error_code in NOT_FOUND_CODES

    return False

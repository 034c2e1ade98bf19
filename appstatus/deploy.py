"""
appstatus/deploy.py - 배포 리소스 태그 및 스택 이름 규칙
"""

# 배포된 리소스에 부여되는 태그 키
PROJECT_TAG_KEY = "ecs-project"
ENV_TAG_KEY = "ecs-environment"
APP_TAG_KEY = "ecs-application"

# 애플리케이션 스택의 ECS 서비스 리소스 타입
ECS_SERVICE_RESOURCE_TYPE = "AWS::ECS::Service"


def stack_name_for_app(project_name: str, env_name: str, app_name: str) -> str:
    """애플리케이션 CloudFormation 스택 이름"""
    return f"{project_name}-{env_name}-{app_name}"


def app_tags(project_name: str, env_name: str, app_name: str) -> dict[str, str]:
    """애플리케이션 리소스를 식별하는 태그"""
    return {
        PROJECT_TAG_KEY: project_name,
        ENV_TAG_KEY: env_name,
        APP_TAG_KEY: app_name,
    }

"""
appstatus/describe - 애플리케이션 상태 조회 및 렌더링
"""

from .app import AppDescriber, environment_session
from .status import AppStatus, AppStatusDesc, render

__all__: list[str] = [
    "AppDescriber",
    "AppStatus",
    "AppStatusDesc",
    "environment_session",
    "render",
]

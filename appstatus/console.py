"""
appstatus/console.py - Rich 콘솔 유틸리티

리포트 렌더링용 Console 생성, 상태 색상, RichHandler logger를 제공합니다.
"""

import io
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

# botocore 노이즈 로그 제한
logging.getLogger("botocore.credentials").setLevel(logging.WARNING)
logging.getLogger("botocore.loaders").setLevel(logging.WARNING)
logging.getLogger("botocore.session").setLevel(logging.WARNING)

# 리포트 렌더링 기본 폭 (더 넓은 표는 호출자가 폭을 늘림)
RENDER_WIDTH = 80

STATUS_STYLES = {
    "ACTIVE": "green",
    "DRAINING": "yellow",
}
DEFAULT_STATUS_STYLE = "red"


def get_console() -> Console:
    """stderr로 출력하는 Rich Console 인스턴스를 생성합니다."""
    return Console(stderr=True, color_system="auto", highlight=False, soft_wrap=True)


def get_render_console(color: bool = True) -> Console:
    """문자열 렌더링용 Console 생성

    Args:
        color: False이면 ANSI 스타일 없이 일반 텍스트로 렌더링
    """
    return Console(
        file=io.StringIO(),
        force_terminal=color,
        color_system="standard" if color else None,
        no_color=not color,
        highlight=False,
        emoji=False,
        width=RENDER_WIDTH,
    )


def status_text(status: str) -> Text:
    """서비스 상태를 색상이 적용된 Text로 반환

    ACTIVE는 초록색, DRAINING은 노란색, 그 외는 빨간색입니다.
    """
    return Text(status, style=STATUS_STYLES.get(status, DEFAULT_STATUS_STYLE))


def get_logger(name: str = "appstatus") -> logging.Logger:
    """Rich 핸들러가 설정된 logger를 반환합니다.

    Args:
        name: logger 이름 (기본값: "appstatus")

    Returns:
        logging.Logger: 설정된 logger 인스턴스
    """
    logger = logging.getLogger(name)

    # 이미 핸들러가 설정되어 있으면 반환
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    handler = RichHandler(console=get_console(), rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)

    return logger

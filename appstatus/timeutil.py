"""
appstatus/timeutil.py - 날짜/시간 관련 유틸리티 함수들
"""

from datetime import datetime, timezone
from typing import Optional

# (임계값 초, 나눌 단위 초, 단수 라벨, 복수 라벨)
_MAGNITUDES = [
    (60, 1, "second", "seconds"),
    (60 * 60, 60, "minute", "minutes"),
    (24 * 60 * 60, 60 * 60, "hour", "hours"),
    (7 * 24 * 60 * 60, 24 * 60 * 60, "day", "days"),
    (30 * 24 * 60 * 60, 7 * 24 * 60 * 60, "week", "weeks"),
    (365 * 24 * 60 * 60, 30 * 24 * 60 * 60, "month", "months"),
]


def from_epoch(seconds: int) -> datetime:
    """epoch 초를 UTC datetime으로 변환"""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def relative_time(epoch_seconds: int, now: Optional[datetime] = None) -> str:
    """epoch 초를 현재 기준 상대 시간 문자열로 변환합니다.

    Args:
        epoch_seconds: 변환할 시각 (epoch 초)
        now: 기준 시각 (None이면 현재 UTC 시각)

    Returns:
        str: "now", "3 minutes ago", "2 hours from now" 형식의 문자열
    """
    now = now or datetime.now(timezone.utc)
    delta = int(now.timestamp()) - epoch_seconds
    suffix = "ago" if delta >= 0 else "from now"
    delta = abs(delta)

    if delta < 1:
        return "now"

    for threshold, unit, singular, plural in _MAGNITUDES:
        if delta < threshold:
            count = delta // unit
            return f"{count} {singular if count == 1 else plural} {suffix}"

    years = delta // (365 * 24 * 60 * 60)
    return f"{years} {'year' if years == 1 else 'years'} {suffix}"

"""
유틸리티 패키지

공통으로 사용되는 유틸리티 함수들을 포함합니다.
"""

from .helpers import ensure_directory, format_duration, truncate_string
from .logging import get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "ensure_directory",
    "format_duration",
    "truncate_string",
]

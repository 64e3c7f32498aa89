"""
데이터 모델 패키지

애드온 관리 시스템의 핵심 데이터 모델들을 정의합니다.
"""

from .base import Config, InstallResult, InstallSummary, ProcessResult, RequiredAddon
from .enums import InstallStatus, RunMode

__all__ = [
    "Config",
    "RequiredAddon",
    "ProcessResult",
    "InstallResult",
    "InstallSummary",
    "InstallStatus",
    "RunMode",
]

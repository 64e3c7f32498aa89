"""
열거형 정의 모듈

애드온 관리 시스템에서 사용되는 상수 값들을 열거형으로 정의합니다.
"""

from enum import Enum


class RunMode(Enum):
    """외부 명령 실행 모드 열거형"""
    # 종료 코드가 0이 아니면 CommandFailedException 발생
    STRICT = "strict"
    # 종료 코드와 관계없이 결과 반환
    UNCHECKED = "unchecked"


class InstallStatus(Enum):
    """애드온 작업 결과 상태 열거형"""
    INSTALLED = "installed"
    REMOVED = "removed"
    DIRTY = "dirty"
    FAILED = "failed"

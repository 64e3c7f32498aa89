"""
공통 유틸리티 함수 모듈

애드온 관리 시스템에서 공통으로 사용되는 헬퍼 함수들을 제공합니다.
"""

from pathlib import Path
from typing import Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    디렉토리 존재 확인 및 생성

    Args:
        path: 디렉토리 경로

    Returns:
        Path: 디렉토리 경로 객체
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def format_duration(seconds: float) -> str:
    """
    지속 시간을 사람이 읽기 쉬운 형태로 변환

    Args:
        seconds: 초 단위 시간

    Returns:
        str: 형식화된 시간 문자열
    """
    if seconds < 60:
        return f"{seconds:.1f}초"
    elif seconds < 3600:
        minutes = seconds // 60
        seconds = seconds % 60
        return f"{int(minutes)}분 {seconds:.1f}초"
    else:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        seconds = seconds % 60
        return f"{int(hours)}시간 {int(minutes)}분 {seconds:.1f}초"


def truncate_string(text: str, max_length: int, suffix: str = "...") -> str:
    """
    문자열을 지정된 길이로 자르기

    Args:
        text: 자를 문자열
        max_length: 최대 길이
        suffix: 자른 부분에 추가할 접미사

    Returns:
        str: 자른 문자열
    """
    if len(text) <= max_length:
        return text

    return text[:max_length - len(suffix)] + suffix

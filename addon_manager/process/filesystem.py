"""
파일 시스템 접근 모듈

애드온 관리에 필요한 디렉토리 조회/생성 기능을 제공합니다.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path

from ..utils.helpers import ensure_directory


class FileSystem(ABC):
    """파일 시스템 접근 기본 추상 클래스"""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """디렉토리 존재 여부"""
        pass

    @abstractmethod
    def create_directory(self, path: str) -> None:
        """디렉토리 재귀 생성"""
        pass

    @abstractmethod
    def list_directories(self, path: str) -> list[str]:
        """
        바로 아래 하위 디렉토리 목록

        Args:
            path: 조회할 디렉토리

        Returns:
            `path`를 접두사로 하는 하위 디렉토리 경로 목록
        """
        pass


class LocalFileSystem(FileSystem):
    """로컬 디스크 파일 시스템"""

    def exists(self, path: str) -> bool:
        return os.path.isdir(path)

    def create_directory(self, path: str) -> None:
        ensure_directory(path)

    def list_directories(self, path: str) -> list[str]:
        # 이름순 정렬로 중복 URL 처리 순서를 고정
        return sorted(str(child) for child in Path(path).iterdir() if child.is_dir())

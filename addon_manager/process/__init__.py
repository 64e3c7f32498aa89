"""
외부 협력자 모듈

명령 실행기와 파일 시스템 접근 추상화를 제공합니다.
"""

from .filesystem import FileSystem, LocalFileSystem
from .runner import ProcessRunner, ShellProcessRunner

__all__ = [
    "FileSystem",
    "LocalFileSystem",
    "ProcessRunner",
    "ShellProcessRunner",
]

"""
애드온 관리 모듈

git 저장소 기반 애드온의 캐싱, 설치, 삭제 기능을 제공합니다.
"""

from .installer import AddonInstaller
from .manifest import Manifest, ManifestParser
from .repository import AddonRepo

__all__ = [
    "AddonRepo",
    "AddonInstaller",
    "Manifest",
    "ManifestParser",
]

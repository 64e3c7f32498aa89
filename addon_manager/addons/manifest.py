"""
애드온 매니페스트 관리 모듈

프로젝트의 addons.json 파일을 읽어 필요한 애드온 목록을 만듭니다.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from ..exceptions import ManifestException
from ..models.base import Config, RequiredAddon
from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Manifest:
    """애드온 매니페스트 모델"""

    manifest_path: str
    addons_dir: str = "addons"
    cache_dir: str = ".addons"
    addons: list[RequiredAddon] = field(default_factory=list)

    def to_config(self, project_path: Union[str, Path]) -> Config:
        """프로젝트 경로 기준 경로 설정 생성"""
        return Config.for_project(str(project_path), self.cache_dir, self.addons_dir)

    def select(self, names: list[str]) -> list[RequiredAddon]:
        """
        이름으로 애드온 선택

        Args:
            names: 애드온 이름 목록 (비어 있으면 전체)

        Returns:
            선택된 애드온 목록

        Raises:
            ManifestException: 매니페스트에 없는 이름이 있을 때
        """
        if not names:
            return list(self.addons)

        by_name = {addon.name: addon for addon in self.addons}
        unknown = [name for name in names if name not in by_name]
        if unknown:
            raise ManifestException(
                self.manifest_path, f"선언되지 않은 애드온: {', '.join(unknown)}"
            )

        return [by_name[name] for name in names]


class ManifestParser:
    """애드온 매니페스트 파서"""

    def __init__(self, settings=None):
        """
        매니페스트 파서 초기화

        Args:
            settings: 시스템 설정 객체 (선택사항, 기본값 제공)
        """
        self.settings = settings
        self.logger = logger

    def _default(self, name: str, fallback: str) -> str:
        if self.settings is None:
            return fallback
        return getattr(self.settings, name, fallback)

    def parse_manifest_file(self, manifest_path: Union[str, Path]) -> Manifest:
        """
        매니페스트 파일 파싱

        Args:
            manifest_path: 매니페스트 파일 경로

        Returns:
            파싱된 매니페스트

        Raises:
            FileNotFoundError: 매니페스트 파일이 없을 때
            ManifestException: 매니페스트 형식이 잘못되었을 때
        """
        manifest_path = Path(manifest_path)

        if not manifest_path.exists():
            raise FileNotFoundError(f"매니페스트 파일을 찾을 수 없습니다: {manifest_path}")

        try:
            with open(manifest_path, encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestException(str(manifest_path), f"JSON 파싱 오류: {e}") from e

        manifest = self.parse_manifest(data, str(manifest_path))
        self.logger.debug(f"매니페스트 로드: {manifest_path} ({len(manifest.addons)}개 애드온)")
        return manifest

    def parse_manifest(self, data: Any, manifest_path: str = "") -> Manifest:
        """
        매니페스트 딕셔너리 파싱

        Args:
            data: JSON에서 읽은 매니페스트 데이터
            manifest_path: 오류 메시지와 애드온에 기록할 파일 경로

        Returns:
            파싱된 매니페스트
        """
        if not isinstance(data, dict):
            raise ManifestException(manifest_path, "최상위 값은 객체여야 합니다")

        addons_dir = data.get('path', self._default('default_addons_dir', 'addons'))
        cache_dir = data.get('cache', self._default('default_cache_dir', '.addons'))
        for key, value in (('path', addons_dir), ('cache', cache_dir)):
            if not isinstance(value, str) or not value.strip():
                raise ManifestException(manifest_path, f"'{key}' 값은 비어 있지 않은 문자열이어야 합니다")

        if Path(addons_dir) == Path(cache_dir):
            raise ManifestException(manifest_path, "'path'와 'cache'는 서로 다른 디렉토리여야 합니다")

        entries = data.get('addons', {})
        if not isinstance(entries, dict):
            raise ManifestException(manifest_path, "'addons' 값은 객체여야 합니다")

        addons = [
            self._parse_addon(name, entry, manifest_path)
            for name, entry in entries.items()
        ]

        return Manifest(
            manifest_path=manifest_path,
            addons_dir=addons_dir,
            cache_dir=cache_dir,
            addons=addons
        )

    def _parse_addon(self, name: str, entry: Any, manifest_path: str) -> RequiredAddon:
        """단일 애드온 항목 파싱"""
        if not isinstance(entry, dict):
            raise ManifestException(manifest_path, f"애드온 항목은 객체여야 합니다: {name}")

        if 'url' not in entry:
            raise ManifestException(manifest_path, f"필수 필드 누락: {name}.url")

        try:
            return RequiredAddon(
                name=name,
                config_file_path=manifest_path,
                url=entry['url'],
                checkout=entry.get('checkout', self._default('default_checkout', 'main')),
                subfolder=entry.get('subfolder', self._default('default_subfolder', '/'))
            )
        except ValidationError as e:
            raise ManifestException(manifest_path, f"잘못된 애드온 항목: {name} - {e}") from e

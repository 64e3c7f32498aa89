"""
애드온 저장소 관리 모듈

애드온 git 저장소를 공용 캐시에 복제하고, 캐시에서 프로젝트의 애드온
디렉토리로 원격 저장소와 분리된 사본을 만들고, 설치된 애드온을 삭제합니다.
"""

import os
from pathlib import Path
from typing import Optional

from ..exceptions import DirtyAddonException
from ..models.base import Config, RequiredAddon
from ..models.enums import RunMode
from ..process.filesystem import FileSystem, LocalFileSystem
from ..process.runner import ProcessRunner, ShellProcessRunner
from ..utils.logging import get_logger

logger = get_logger(__name__)

INITIAL_COMMIT_MESSAGE = "Initial commit"


class AddonRepo:
    """애드온 저장소 관리자"""

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        fs: Optional[FileSystem] = None
    ):
        """
        애드온 저장소 관리자 초기화

        Args:
            runner: 외부 명령 실행기 (None이면 ShellProcessRunner)
            fs: 파일 시스템 접근자 (None이면 LocalFileSystem)
        """
        self.runner = runner or ShellProcessRunner()
        self.fs = fs or LocalFileSystem()
        self.logger = logger

    def _get_cache_path(self, addon: RequiredAddon, config: Config) -> str:
        """애드온 캐시 경로 생성"""
        return str(Path(config.cache_path) / addon.name)

    def _get_addon_path(self, addon: RequiredAddon, config: Config) -> str:
        """설치된 애드온 경로 생성"""
        return str(Path(config.addons_path) / addon.name)

    def _get_copy_source(self, addon: RequiredAddon, config: Config) -> str:
        """rsync 복사 원본 경로 (디렉토리 내용을 복사하도록 끝에 구분자 포함)"""
        # "/" 또는 빈 값은 저장소 루트
        subfolder = addon.subfolder.strip("/")
        return str(Path(self._get_cache_path(addon, config)) / subfolder) + os.sep

    async def load_cache(self, config: Config) -> dict[str, str]:
        """
        캐시된 애드온 목록 조회

        Args:
            config: 경로 설정

        Returns:
            원격 저장소 URL -> 캐시 디렉토리 경로 딕셔너리

        Raises:
            CommandFailedException: 캐시 디렉토리에 origin 원격이 없을 때
        """
        cache: dict[str, str] = {}

        if not self.fs.exists(config.cache_path):
            self.fs.create_directory(config.cache_path)
            self.logger.info(f"캐시 디렉토리 생성: {config.cache_path}")
            return cache

        for directory in self.fs.list_directories(config.cache_path):
            result = await self.runner.run(
                directory, ["git", "remote", "get-url", "origin"], RunMode.STRICT
            )
            url = result.stdout.strip()

            if url in cache:
                self.logger.warning(
                    f"같은 원격 저장소가 여러 캐시에 있습니다: {url} "
                    f"({cache[url]}, {directory}) - {directory} 사용"
                )

            cache[url] = directory

        self.logger.debug(f"캐시 로드 완료: {len(cache)}개 저장소")
        return cache

    async def cache_addon(self, addon: RequiredAddon, config: Config) -> None:
        """
        애드온 저장소를 캐시에 복제 (이미 있으면 아무것도 하지 않음)

        Args:
            addon: 애드온 명세
            config: 경로 설정

        Raises:
            CommandFailedException: git clone 실패 시
        """
        cache_path = self._get_cache_path(addon, config)

        if self.fs.exists(cache_path):
            self.logger.debug(f"이미 캐시된 애드온: {addon.name} ({cache_path})")
            return

        self.logger.info(f"애드온 복제: {addon.name} <- {addon.url}")
        await self.runner.run(
            config.cache_path,
            ["git", "clone", addon.url, "--recurse-submodules", addon.name],
            RunMode.STRICT
        )

    async def copy_addon_from_cache(self, addon: RequiredAddon, config: Config) -> None:
        """
        캐시에서 프로젝트로 애드온 복사

        지정된 체크아웃의 하위 폴더를 애드온 디렉토리로 복사한 뒤 새 git
        저장소로 초기화하고 첫 커밋을 만듭니다. 복사본은 원격 저장소나
        캐시의 이력과 연결되지 않습니다.

        Args:
            addon: 애드온 명세
            config: 경로 설정

        Raises:
            CommandFailedException: checkout, rsync, init/add/commit 실패 시
        """
        cache_path = self._get_cache_path(addon, config)
        addon_dir = self._get_addon_path(addon, config)
        copy_from = self._get_copy_source(addon, config)

        await self.runner.run(
            cache_path, ["git", "checkout", "-f", addon.checkout], RunMode.STRICT
        )

        # pull/submodule 갱신 실패는 이미 체크아웃한 상태로 계속 진행
        result = await self.runner.run(cache_path, ["git", "pull"], RunMode.UNCHECKED)
        if not result.succeeded:
            self.logger.warning(
                f"애드온 갱신 실패, 캐시된 상태 사용: {addon.name} "
                f"(종료코드: {result.return_code})"
            )

        result = await self.runner.run(
            cache_path,
            ["git", "submodule", "update", "--init", "--recursive"],
            RunMode.UNCHECKED
        )
        if not result.succeeded:
            self.logger.warning(
                f"서브모듈 갱신 실패: {addon.name} (종료코드: {result.return_code})"
            )

        # rsync는 대상 경로의 마지막 디렉토리만 만듦
        if not self.fs.exists(config.addons_path):
            self.fs.create_directory(config.addons_path)

        self.logger.info(f"애드온 복사: {copy_from} -> {addon_dir}")
        await self.runner.run(
            config.project_path,
            ["rsync", "-av", copy_from, addon_dir, "--exclude", ".git"],
            RunMode.STRICT
        )

        await self.runner.run(addon_dir, ["git", "init"], RunMode.STRICT)
        await self.runner.run(addon_dir, ["git", "add", "-A"], RunMode.STRICT)
        await self.runner.run(
            addon_dir, ["git", "commit", "-m", INITIAL_COMMIT_MESSAGE], RunMode.STRICT
        )

        self.logger.info(f"애드온 설치 완료: {addon.name} ({addon.checkout})")

    async def delete_addon(self, addon: RequiredAddon, config: Config) -> None:
        """
        설치된 애드온 삭제

        Args:
            addon: 애드온 명세
            config: 경로 설정

        Raises:
            DirtyAddonException: 커밋되지 않은 변경 사항이 있을 때
            CommandFailedException: 삭제 명령 실패 시
        """
        addon_dir = self._get_addon_path(addon, config)

        if not self.fs.exists(addon_dir):
            return

        result = await self.runner.run(
            addon_dir, ["git", "status", "--porcelain"], RunMode.UNCHECKED
        )

        if result.stdout.strip():
            self.logger.error(f"변경된 애드온 삭제 거부: {addon.name} ({addon_dir})")
            raise DirtyAddonException(addon.name, addon_dir, result.stdout)

        await self.runner.run(
            config.addons_path, ["rm", "-rf", addon_dir], RunMode.STRICT
        )
        self.logger.info(f"애드온 삭제 완료: {addon.name}")

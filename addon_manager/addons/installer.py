"""
애드온 설치 오케스트레이터 모듈

여러 애드온의 캐시, 삭제, 복사 작업을 묶어 실행하고 결과를 요약합니다.
"""

import asyncio
import time
from collections import defaultdict
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence

from ..exceptions import AddonManagerException, DirtyAddonException
from ..models.base import Config, InstallResult, InstallSummary, RequiredAddon
from ..models.enums import InstallStatus
from ..utils.helpers import format_duration
from ..utils.logging import get_logger
from .repository import AddonRepo

logger = get_logger(__name__)


class AddonInstaller:
    """애드온 설치 오케스트레이터"""

    def __init__(self, repo: Optional[AddonRepo] = None, settings=None):
        """
        설치 오케스트레이터 초기화

        Args:
            repo: 애드온 저장소 관리자 (None이면 기본 구성)
            settings: 시스템 설정 (None이면 동시 실행 1개)
        """
        self.settings = settings
        self.repo = repo or AddonRepo()
        self.logger = logger
        self.max_concurrent = getattr(settings, 'max_concurrent_addons', 1) if settings is not None else 1

    async def install(
        self,
        addons: Sequence[RequiredAddon],
        config: Config,
        max_concurrent: Optional[int] = None
    ) -> InstallSummary:
        """
        애드온 설치

        캐시를 한 번 로드한 뒤 각 애드온마다 캐시 복제, 기존 설치본 삭제,
        캐시에서 복사를 차례로 실행합니다. 한 애드온의 실패는 다른 애드온의
        설치를 멈추지 않습니다.

        Args:
            addons: 설치할 애드온 목록
            config: 경로 설정
            max_concurrent: 동시 설치 수 (None이면 설정값 사용)

        Returns:
            설치 결과 요약

        Raises:
            CommandFailedException: 캐시 로드 실패 시
        """
        start_time = time.monotonic()
        cache = await self.repo.load_cache(config)

        for addon in addons:
            cached_at = cache.get(addon.url)
            expected = str(Path(config.cache_path) / addon.name)
            if cached_at and cached_at != expected:
                self.logger.warning(
                    f"같은 원격 저장소가 다른 이름으로 캐시되어 있습니다: {addon.name} ({cached_at})"
                )

        async def install_one(addon: RequiredAddon) -> None:
            await self.repo.cache_addon(addon, config)
            await self.repo.delete_addon(addon, config)
            await self.repo.copy_addon_from_cache(addon, config)

        results = await self._run_all(
            addons, config, install_one, InstallStatus.INSTALLED, max_concurrent
        )
        summary = InstallSummary(results=results, execution_time=time.monotonic() - start_time)

        self.logger.info(
            f"애드온 설치 완료: 성공 {summary.success_count}개, 실패 {summary.failure_count}개 "
            f"({format_duration(summary.execution_time)})"
        )
        return summary

    async def uninstall(
        self,
        addons: Sequence[RequiredAddon],
        config: Config,
        max_concurrent: Optional[int] = None
    ) -> InstallSummary:
        """
        설치된 애드온 삭제

        Args:
            addons: 삭제할 애드온 목록
            config: 경로 설정
            max_concurrent: 동시 삭제 수 (None이면 설정값 사용)

        Returns:
            삭제 결과 요약
        """
        start_time = time.monotonic()

        async def uninstall_one(addon: RequiredAddon) -> None:
            await self.repo.delete_addon(addon, config)

        results = await self._run_all(
            addons, config, uninstall_one, InstallStatus.REMOVED, max_concurrent
        )
        summary = InstallSummary(results=results, execution_time=time.monotonic() - start_time)

        self.logger.info(
            f"애드온 삭제 완료: 성공 {summary.success_count}개, 실패 {summary.failure_count}개 "
            f"({format_duration(summary.execution_time)})"
        )
        return summary

    async def _run_all(
        self,
        addons: Sequence[RequiredAddon],
        config: Config,
        operation: Callable[[RequiredAddon], Awaitable[None]],
        success_status: InstallStatus,
        max_concurrent: Optional[int]
    ) -> list[InstallResult]:
        """애드온별 작업을 제한된 동시성으로 실행"""
        semaphore = asyncio.Semaphore(max_concurrent or self.max_concurrent)
        # 같은 캐시 경로/설치 경로를 쓰는 작업은 순서대로 실행
        cache_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        addon_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

        async def run_one(addon: RequiredAddon) -> InstallResult:
            cache_path = str(Path(config.cache_path) / addon.name)
            addon_path = str(Path(config.addons_path) / addon.name)

            async with semaphore, cache_locks[cache_path], addon_locks[addon_path]:
                try:
                    await operation(addon)
                except DirtyAddonException as e:
                    return InstallResult(
                        addon_name=addon.name,
                        status=InstallStatus.DIRTY,
                        message=e.message,
                        error_code=e.error_code
                    )
                except AddonManagerException as e:
                    self.logger.error(f"애드온 작업 실패: {addon.name} - {e.message}")
                    return InstallResult(
                        addon_name=addon.name,
                        status=InstallStatus.FAILED,
                        message=e.message,
                        error_code=e.error_code
                    )

            return InstallResult(addon_name=addon.name, status=success_status)

        return list(await asyncio.gather(*(run_one(addon) for addon in addons)))

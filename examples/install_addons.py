#!/usr/bin/env python3
"""
애드온 관리 시스템 사용 예제

매니페스트를 읽어 애드온을 설치하고, 캐시 상태를 확인한 뒤 삭제하는
흐름을 보여줍니다.

    python examples/install_addons.py /path/to/project
"""

import asyncio
import sys

from addon_manager.addons import AddonInstaller, AddonRepo, ManifestParser
from addon_manager.config.settings import Settings
from addon_manager.exceptions import DirtyAddonException
from addon_manager.process import ShellProcessRunner
from addon_manager.utils.logging import setup_logging


async def basic_usage_example(project_path: str):
    """기본 사용법 예제"""
    print("=== 애드온 관리 시스템 기본 사용법 ===")

    settings = Settings(max_concurrent_addons=2)
    setup_logging(settings)

    manifest = ManifestParser(settings).parse_manifest_file(f"{project_path}/{settings.manifest_file}")
    config = manifest.to_config(project_path)
    repo = AddonRepo(ShellProcessRunner(settings))

    # 전체 설치
    print("\n1. 애드온 설치")
    summary = await AddonInstaller(repo, settings).install(manifest.addons, config)
    for result in summary.results:
        print(f"- {result.addon_name}: {result.status.value} {result.message}")

    # 캐시 상태
    print("\n2. 캐시된 저장소")
    cache = await repo.load_cache(config)
    for url, path in cache.items():
        print(f"- {url} -> {path}")

    # 개별 삭제
    print("\n3. 애드온 삭제")
    for addon in manifest.addons:
        try:
            await repo.delete_addon(addon, config)
            print(f"- {addon.name}: 삭제됨")
        except DirtyAddonException as e:
            print(f"- {addon.name}: 로컬 변경 사항 있음 {e.changed_files}")


if __name__ == "__main__":
    asyncio.run(basic_usage_example(sys.argv[1] if len(sys.argv) > 1 else "."))

"""
애드온 관리 명령줄 진입점

    addon-manager install [--project DIR] [--jobs N] [NAME ...]
    addon-manager uninstall [--project DIR] [NAME ...]
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from .addons.installer import AddonInstaller
from .addons.manifest import ManifestParser
from .addons.repository import AddonRepo
from .config.settings import Settings, get_settings
from .exceptions import AddonManagerException
from .models.base import InstallSummary
from .models.enums import InstallStatus
from .process.runner import ShellProcessRunner
from .utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_DIRTY = 2


def positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"1 이상이어야 합니다: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """명령줄 파서 생성"""
    parser = argparse.ArgumentParser(
        prog="addon-manager",
        description="git 저장소 기반 애드온 설치 도구"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("install", "매니페스트의 애드온 설치"),
                            ("uninstall", "설치된 애드온 삭제")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--project", default=".", help="프로젝트 디렉토리 (기본값: 현재 디렉토리)"
        )
        sub.add_argument(
            "--jobs", type=positive_int, default=None, help="동시에 처리할 애드온 수"
        )
        sub.add_argument(
            "names", nargs="*", help="처리할 애드온 이름 (생략하면 전체)"
        )

    return parser


def exit_code_for(summary: InstallSummary) -> int:
    """작업 요약에 따른 종료 코드"""
    if summary.all_successful:
        return EXIT_OK
    if summary.dirty_count:
        return EXIT_DIRTY
    return EXIT_FAILED


async def run_command(args: argparse.Namespace, settings: Settings) -> int:
    """
    명령 실행

    Args:
        args: 파싱된 명령줄 인자
        settings: 시스템 설정

    Returns:
        프로세스 종료 코드
    """
    project = Path(args.project)
    manifest = ManifestParser(settings).parse_manifest_file(project / settings.manifest_file)
    config = manifest.to_config(project)
    addons = manifest.select(args.names)

    repo = AddonRepo(ShellProcessRunner(settings))
    installer = AddonInstaller(repo, settings)

    if args.command == "install":
        summary = await installer.install(addons, config, args.jobs)
    else:
        summary = await installer.uninstall(addons, config, args.jobs)

    for result in summary.results:
        if result.status == InstallStatus.DIRTY:
            logger.warning(f"{result.addon_name}: 로컬 변경 사항이 있습니다 - {result.message}")
        elif not result.success:
            logger.error(f"{result.addon_name}: {result.message}")
        else:
            logger.info(f"{result.addon_name}: {result.status.value}")

    return exit_code_for(summary)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """명령줄 메인 함수"""
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except AddonManagerException as e:
        print(e.message, file=sys.stderr)
        return EXIT_FAILED

    setup_logging(settings)

    try:
        return asyncio.run(run_command(args, settings))
    except FileNotFoundError as e:
        logger.error(str(e))
    except AddonManagerException as e:
        logger.error(e.message)
    except KeyboardInterrupt:
        logger.info("사용자 요청으로 중단")

    return EXIT_FAILED


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()

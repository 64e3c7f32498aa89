"""
프로세스 실행 모듈

작업 디렉토리 안에서 외부 명령(git, rsync, rm)을 실행하고 결과를 수집합니다.
"""

import asyncio
import os
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import psutil

from ..exceptions import CommandFailedException, ProcessTimeoutException
from ..models.base import ProcessResult
from ..models.enums import RunMode
from ..utils.helpers import truncate_string
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ProcessRunner(ABC):
    """외부 명령 실행기 기본 추상 클래스"""

    @abstractmethod
    async def run(self, working_dir: str, command: Sequence[str], mode: RunMode) -> ProcessResult:
        """
        외부 명령 실행 (추상 메서드)

        Args:
            working_dir: 명령을 실행할 디렉토리
            command: 실행 파일 이름과 인자 목록
            mode: STRICT면 종료 코드가 0이 아닐 때 예외 발생,
                UNCHECKED면 종료 코드와 관계없이 결과 반환

        Returns:
            실행 결과

        Raises:
            CommandFailedException: STRICT 모드에서 명령이 실패했을 때,
                또는 모드와 관계없이 프로세스를 생성할 수 없을 때
        """
        pass


class ShellProcessRunner(ProcessRunner):
    """asyncio 서브프로세스 기반 명령 실행기"""

    def __init__(self, settings=None, timeout: Optional[float] = None):
        """
        명령 실행기 초기화

        Args:
            settings: 시스템 설정 객체 (선택사항)
            timeout: 명령 실행 타임아웃 (초, None이면 설정값 사용)
        """
        self.settings = settings
        self.logger = logger
        if timeout is None and settings is not None:
            timeout = settings.process_timeout
        self.timeout = timeout

    async def run(self, working_dir: str, command: Sequence[str], mode: RunMode) -> ProcessResult:
        command = list(command)
        command_line = " ".join(command)

        # 자격 증명 프롬프트 대기로 멈추지 않도록 설정
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"

        self.logger.debug(f"명령 실행: `{command_line}` ({working_dir}, {mode.value})")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=working_dir,
                env=env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True  # 새 세션으로 시작하여 시그널 격리
            )
        except OSError as e:
            self.logger.error(f"프로세스 생성 오류: `{command_line}` - {e}")
            raise CommandFailedException(
                command, working_dir, None, reason=f"프로세스 생성 오류: {e}"
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            self.logger.error(f"명령 실행 타임아웃: `{command_line}` ({self.timeout}초)")
            await self._terminate_process(process)
            raise ProcessTimeoutException(command, working_dir, self.timeout)
        except asyncio.CancelledError:
            await self._terminate_process(process)
            raise

        result = ProcessResult(
            return_code=process.returncode or 0,
            stdout=stdout.decode('utf-8', errors='replace') if stdout else "",
            stderr=stderr.decode('utf-8', errors='replace') if stderr else ""
        )

        if result.succeeded:
            return result

        if mode == RunMode.STRICT:
            self.logger.error(
                f"명령 실행 실패: `{command_line}` (종료코드: {result.return_code}) "
                f"{truncate_string(result.stderr.strip(), 500)}"
            )
            raise CommandFailedException(
                command,
                working_dir,
                result.return_code,
                stdout=result.stdout,
                stderr=result.stderr
            )

        self.logger.debug(f"명령 종료코드 무시: `{command_line}` (종료코드: {result.return_code})")
        return result

    async def _terminate_process(self, process: asyncio.subprocess.Process) -> None:
        """프로세스와 자식 프로세스 강제 종료"""
        if process.returncode is not None:
            return

        try:
            parent = psutil.Process(process.pid)
            procs = parent.children(recursive=True) + [parent]
        except psutil.NoSuchProcess:
            return

        for proc in procs:
            try:
                proc.terminate()
            except psutil.NoSuchProcess:
                pass

        # 5초 대기 후 남은 프로세스는 SIGKILL
        _, alive = await asyncio.to_thread(psutil.wait_procs, procs, timeout=5)
        for proc in alive:
            try:
                proc.kill()
            except psutil.NoSuchProcess:
                pass

        await process.wait()

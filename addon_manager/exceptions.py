"""
예외 클래스 정의 모듈

애드온 관리 시스템에서 사용되는 커스텀 예외들을 정의합니다.
"""

from typing import Optional, Sequence


class AddonManagerException(Exception):
    """애드온 관리 시스템 기본 예외 클래스"""

    def __init__(self, message: str, error_code: Optional[str] = None):
        """
        예외 초기화

        Args:
            message: 오류 메시지
            error_code: 오류 코드 (선택사항)
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class CommandFailedException(AddonManagerException):
    """외부 명령이 실패했을 때 발생하는 예외"""

    def __init__(
        self,
        command: Sequence[str],
        working_dir: str,
        return_code: Optional[int],
        stdout: str = "",
        stderr: str = "",
        reason: Optional[str] = None
    ):
        """
        명령 실패 예외 초기화

        Args:
            command: 실행한 명령 인자 목록
            working_dir: 명령 실행 디렉토리
            return_code: 종료 코드 (프로세스 생성 실패 시 None)
            stdout: 표준 출력
            stderr: 표준 에러
            reason: 추가 실패 사유
        """
        command_line = " ".join(command)
        detail = reason or stderr.strip() or f"종료코드 {return_code}"
        message = f"명령 실행 실패: `{command_line}` ({working_dir}) - {detail}"
        super().__init__(message, "COMMAND_FAILED")
        self.command = list(command)
        self.working_dir = working_dir
        self.return_code = return_code
        self.stdout = stdout
        self.stderr = stderr


class ProcessTimeoutException(CommandFailedException):
    """외부 명령이 제한 시간을 초과했을 때 발생하는 예외"""

    def __init__(self, command: Sequence[str], working_dir: str, timeout_seconds: float):
        super().__init__(
            command,
            working_dir,
            None,
            reason=f"타임아웃 ({timeout_seconds}초)"
        )
        self.error_code = "PROCESS_TIMEOUT"
        self.timeout_seconds = timeout_seconds


class DirtyAddonException(AddonManagerException):
    """커밋되지 않은 변경 사항이 있는 애드온을 삭제하려 할 때 발생하는 예외"""

    def __init__(self, addon_name: str, addon_dir: str, changes: str = ""):
        """
        변경된 애드온 예외 초기화

        Args:
            addon_name: 애드온 이름
            addon_dir: 설치된 애드온 디렉토리
            changes: `git status --porcelain` 출력
        """
        message = (
            f"애드온에 커밋되지 않은 변경 사항이 있어 삭제를 거부합니다: "
            f"{addon_name} ({addon_dir})"
        )
        super().__init__(message, "DIRTY_ADDON")
        self.addon_name = addon_name
        self.addon_dir = addon_dir
        self.changes = changes

    @property
    def changed_files(self) -> list[str]:
        """
        변경된 파일 경로 목록

        이름 변경/복사 항목은 새 경로를, 따옴표로 감싼 경로는 원래 이름을 반환합니다.
        """
        files = []
        for line in self.changes.splitlines():
            if not line.strip():
                continue
            status, path = line[:2], line[3:]
            if ("R" in status or "C" in status) and " -> " in path:
                path = path.rpartition(" -> ")[2]
            files.append(_unquote_path(path))
        return files


def _unquote_path(path: str) -> str:
    """git이 C 스타일로 따옴표 처리한 경로 복원"""
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    # 8진수 이스케이프는 UTF-8 바이트 단위
    unescaped = path[1:-1].encode('utf-8').decode('unicode_escape')
    return unescaped.encode('latin-1').decode('utf-8', errors='replace')


class ManifestException(AddonManagerException):
    """애드온 매니페스트 오류 시 발생하는 예외"""

    def __init__(self, manifest_path: str, error_detail: str):
        message = f"매니페스트 오류: {manifest_path} - {error_detail}"
        super().__init__(message, "MANIFEST_ERROR")
        self.manifest_path = manifest_path
        self.error_detail = error_detail


class ConfigurationException(AddonManagerException):
    """설정 오류 시 발생하는 예외"""

    def __init__(self, config_key: str, error_detail: str):
        """
        설정 예외 초기화

        Args:
            config_key: 설정 키
            error_detail: 오류 상세 정보
        """
        message = f"설정 오류: {config_key} - {error_detail}"
        super().__init__(message, "CONFIGURATION_ERROR")
        self.config_key = config_key
        self.error_detail = error_detail

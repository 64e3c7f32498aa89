"""
기본 데이터 모델 모듈

애드온 관리 시스템의 핵심 데이터 구조들을 정의합니다.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import InstallStatus


class Config(BaseModel):
    """프로젝트 경로 설정 모델"""

    model_config = ConfigDict(frozen=True)

    project_path: str = Field(
        ...,
        description="프로젝트 디렉토리 경로",
        min_length=1
    )
    cache_path: str = Field(
        ...,
        description="애드온 캐시 디렉토리 경로",
        min_length=1
    )
    addons_path: str = Field(
        ...,
        description="애드온 설치 디렉토리 경로",
        min_length=1
    )

    @classmethod
    def for_project(
        cls,
        project_path: str,
        cache_dir: str = ".addons",
        addons_dir: str = "addons"
    ) -> "Config":
        """
        프로젝트 경로 기준으로 설정 생성

        Args:
            project_path: 프로젝트 디렉토리 경로 (상대 경로면 현재 디렉토리 기준)
            cache_dir: 캐시 디렉토리 (상대 경로면 프로젝트 기준)
            addons_dir: 설치 디렉토리 (상대 경로면 프로젝트 기준)

        Returns:
            Config: 경로 설정
        """
        # 명령마다 작업 디렉토리가 다르므로 절대 경로로 고정
        project = Path(project_path).resolve()
        return cls(
            project_path=str(project),
            cache_path=str(project / cache_dir),
            addons_path=str(project / addons_dir)
        )


class RequiredAddon(BaseModel):
    """필요한 애드온 명세 모델"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        description="캐시와 설치 디렉토리에서 사용할 애드온 이름",
        min_length=1
    )
    config_file_path: str = Field(
        default="",
        description="애드온이 선언된 매니페스트 파일 경로"
    )
    url: str = Field(
        ...,
        description="git clone 가능한 원격 저장소 주소",
        min_length=1
    )
    checkout: str = Field(
        ...,
        description="체크아웃할 브랜치, 태그 또는 커밋",
        min_length=1
    )
    subfolder: str = Field(
        default="/",
        description="프로젝트로 복사할 저장소 내 경로"
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """애드온 이름 유효성 검사"""
        v = v.strip()
        if not v:
            raise ValueError('애드온 이름은 필수입니다')

        # 캐시/설치 디렉토리 바로 아래 한 단계여야 함
        if '/' in v or '\\' in v or v in ('.', '..'):
            raise ValueError('애드온 이름은 하나의 디렉토리 이름이어야 합니다')

        return v


class ProcessResult(BaseModel):
    """외부 명령 실행 결과 모델"""

    return_code: int = Field(
        default=0,
        description="프로세스 종료 코드"
    )
    stdout: str = Field(
        default="",
        description="표준 출력"
    )
    stderr: str = Field(
        default="",
        description="표준 에러"
    )

    @property
    def succeeded(self) -> bool:
        return self.return_code == 0


class InstallResult(BaseModel):
    """애드온 단위 작업 결과 모델"""

    addon_name: str = Field(..., description="애드온 이름")
    status: InstallStatus = Field(..., description="작업 결과 상태")
    message: str = Field(default="", description="결과 메시지")
    error_code: Optional[str] = Field(default=None, description="실패 시 오류 코드")

    @property
    def success(self) -> bool:
        return self.status in (InstallStatus.INSTALLED, InstallStatus.REMOVED)


class InstallSummary(BaseModel):
    """설치/삭제 작업 요약 모델"""

    results: list[InstallResult] = Field(default_factory=list)
    execution_time: float = Field(
        default=0.0,
        description="전체 실행 시간 (초)",
        ge=0
    )

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def dirty_count(self) -> int:
        return sum(1 for r in self.results if r.status == InstallStatus.DIRTY)

    @property
    def all_successful(self) -> bool:
        return all(r.success for r in self.results)

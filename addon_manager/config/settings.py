"""
설정 관리 모듈

환경 변수를 통한 시스템 설정을 관리합니다.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from ..exceptions import ConfigurationException


class Settings(BaseSettings):
    """시스템 설정 관리 클래스"""

    # 매니페스트 설정
    manifest_file: str = Field(
        default="addons.json",
        description="프로젝트 내 애드온 매니페스트 파일 이름"
    )
    default_cache_dir: str = Field(
        default=".addons",
        description="애드온 캐시 디렉토리 (프로젝트 기준 상대 경로)"
    )
    default_addons_dir: str = Field(
        default="addons",
        description="애드온 설치 디렉토리 (프로젝트 기준 상대 경로)"
    )
    default_checkout: str = Field(
        default="main",
        description="매니페스트에 체크아웃이 없을 때 사용할 브랜치"
    )
    default_subfolder: str = Field(
        default="/",
        description="매니페스트에 하위 폴더가 없을 때 사용할 경로"
    )

    # 프로세스 설정
    process_timeout: int = Field(
        default=600,
        description="외부 명령 실행 타임아웃 (초)"
    )
    max_concurrent_addons: int = Field(
        default=1,
        description="동시에 설치할 최대 애드온 수"
    )

    # 로깅 설정
    log_level: str = Field(
        default="INFO",
        description="로그 레벨"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="로그 포맷"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="로그 파일 경로"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        # 환경 변수 이름을 대문자로 변환
        case_sensitive = False

    def validate_configuration(self) -> None:
        """설정 유효성 검증"""
        if self.process_timeout <= 0:
            raise ConfigurationException(
                "PROCESS_TIMEOUT", "0보다 커야 합니다"
            )

        if self.max_concurrent_addons <= 0:
            raise ConfigurationException(
                "MAX_CONCURRENT_ADDONS", "0보다 커야 합니다"
            )

        if not self.manifest_file.strip():
            raise ConfigurationException(
                "MANIFEST_FILE", "매니페스트 파일 이름이 비어 있습니다"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    설정 인스턴스를 반환합니다 (싱글톤 패턴)

    Returns:
        Settings: 설정 인스턴스
    """
    settings = Settings()
    settings.validate_configuration()
    return settings

"""
애드온 관리 시스템

git 저장소를 공용 캐시에 복제하고 프로젝트의 애드온 디렉토리에
분리된 사본으로 설치합니다.
"""

__version__ = "0.1.0"

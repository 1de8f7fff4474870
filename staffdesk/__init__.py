# staffdesk/__init__.py

"""
staffdesk FastAPI 애플리케이션의 메인 패키지입니다.

사용자 계정, 부서, 직원, 이미지 파일 업로드를 관리하는 인증된 HTTP API를 제공합니다.
공통 설정, 데이터베이스 연결, 인증/검증/쿼리 빌더를 담는 core 서브패키지와
각 비즈니스 도메인을 대표하는 domains 서브패키지로 구성됩니다.
"""

APP_NAME = "staffdesk API"
APP_VERSION = "0.1.0"
API_PREFIX = "/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Record-management backend for users, departments, employees and image uploads."
__all__ = []

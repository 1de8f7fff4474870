# staffdesk/core/__init__.py

"""
애플리케이션 전반에서 사용되는 핵심 구성 요소 패키지입니다.

- `config.py`: 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 비동기 엔진, 세션 관리 (SQLModel + SQLAlchemy asyncio).
- `exceptions.py`: 공통 오류 분류 체계와 저장소 오류 분류.
- `security.py`: 토큰 발급/검증, 비밀번호 해싱.
- `dependencies.py`: 인증 게이트 등 FastAPI 의존성.
- `validation.py`: 요청 본문 검증.
- `query_builder.py`: 선택적 필드 기반 파라미터 바인딩 SQL 생성.
- `crud_base.py`: 리포지토리 공통 기반 클래스.
"""

__all__ = []

# staffdesk/domains/usr/__init__.py

"""
'usr' 도메인 패키지입니다.

사용자 계정과 인증(가입/로그인), 그리고 토큰 소유자 본인의 프로필 조회/수정을 담당합니다.

주요 서브모듈:
- `models.py`: users 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 인증 요청/응답, 프로필 조회/수정 스키마.
- `crud.py`: 이메일 중복 검사, 비밀번호 검증, 프로필 부분 수정 로직.
- `routers.py`: `/auth`, `/user` API 엔드포인트.
"""

# staffdesk/domains/__init__.py

"""
staffdesk 애플리케이션의 도메인 패키지입니다.

- `usr`: 사용자 계정, 인증(가입/로그인), 프로필
- `hr`: 부서와 직원 레코드
- `shared`: 이미지 업로드 및 파일 기록
- `models`: 모든 도메인의 테이블 모델을 한곳에서 임포트
"""

# staffdesk/domains/shared/__init__.py

"""
'shared' 도메인 패키지입니다.

사용자·회사·직원 이미지로 쓰이는 파일 업로드를 담당합니다.
업로드된 파일은 ObjectStorage에 저장되고, 업로드 기록은 files 테이블에 추가만 됩니다.
"""

# staffdesk/domains/shared/schemas.py

"""
'shared' 도메인의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from staffdesk.core.validation import APISchema


class FileRead(APISchema):
    uri: str

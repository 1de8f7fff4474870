# staffdesk/domains/models/__init__.py

"""
모든 도메인의 SQLModel 모델들을 한 곳에서 임포트하여
SQLModel.metadata가 모든 테이블을 인식하도록 보장합니다.
"""

# usr (User)
from staffdesk.domains.usr.models import User

# hr (Department, Employee)
from staffdesk.domains.hr.models import Department, Employee

# shared (File)
from staffdesk.domains.shared.models import File

__all__ = ["User", "Department", "Employee", "File"]

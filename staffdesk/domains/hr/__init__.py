# staffdesk/domains/hr/__init__.py

"""
'hr' 도메인 패키지입니다.

부서(departments)와 직원(employees) 레코드의 생성, 검색, 부분 수정, 삭제를 담당합니다.
직원은 반드시 존재하는 부서에 속하며, 직원이 남아 있는 부서는 삭제할 수 없습니다.
"""

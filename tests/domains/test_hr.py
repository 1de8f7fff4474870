# tests/domains/test_hr.py

"""
'hr' 도메인 API 엔드포인트 통합 테스트입니다.
- /v1/department: 부서 생성/검색/수정/삭제
- /v1/employee: 직원 등록/검색/수정/삭제
"""

import uuid
from datetime import datetime

import pytest
from httpx import AsyncClient

from staffdesk.domains.hr import crud as hr_crud


# =============================================================================
# 1. 부서 (Department)
# =============================================================================
@pytest.mark.asyncio
async def test_create_department(authorized_client: AsyncClient):
    res = await authorized_client.post("/v1/department", json={"name": "Engineering"})
    assert res.status_code == 201
    body = res.json()
    assert body["name"] == "Engineering"
    uuid.UUID(body["departmentId"])
    assert body["createdAt"] and body["updatedAt"]


@pytest.mark.asyncio
async def test_create_department_duplicate_name_is_conflict(authorized_client: AsyncClient, department):
    res = await authorized_client.post("/v1/department", json={"name": "Engineering"})
    assert res.status_code == 409
    assert res.json() == {"error": "Department name already exists"}


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"name": "abc"}, {"name": "x" * 34}, {"name": None}, {"name": 1234}])
async def test_create_department_validation(authorized_client: AsyncClient, payload):
    res = await authorized_client.post("/v1/department", json=payload)
    assert res.status_code == 400
    assert "name" in res.json()["fields"]


@pytest.mark.asyncio
async def test_search_departments_newest_first_with_filter_and_paging(authorized_client: AsyncClient):
    for name in ("Engineering", "Sales", "Support Engineering", "Marketing"):
        res = await authorized_client.post("/v1/department", json={"name": name})
        assert res.status_code == 201

    res = await authorized_client.get("/v1/department")
    assert res.status_code == 200
    assert [d["name"] for d in res.json()] == ["Marketing", "Support Engineering", "Sales", "Engineering"]

    res = await authorized_client.get("/v1/department", params={"name": "ENGINEER"})
    assert [d["name"] for d in res.json()] == ["Support Engineering", "Engineering"]

    res = await authorized_client.get("/v1/department", params={"limit": 2, "offset": 1})
    assert [d["name"] for d in res.json()] == ["Support Engineering", "Sales"]

    res = await authorized_client.get("/v1/department", params={"limit": 0})
    assert res.json() == []


@pytest.mark.asyncio
async def test_search_departments_like_wildcards_are_literal(authorized_client: AsyncClient):
    await authorized_client.post("/v1/department", json={"name": "R&D 100%"})
    await authorized_client.post("/v1/department", json={"name": "Research"})

    res = await authorized_client.get("/v1/department", params={"name": "%"})
    assert [d["name"] for d in res.json()] == ["R&D 100%"]

    res = await authorized_client.get("/v1/department", params={"name": "_"})
    assert res.json() == []


@pytest.mark.asyncio
async def test_search_departments_with_offset_only(authorized_client: AsyncClient):
    for name in ("Engineering", "Sales", "Marketing"):
        await authorized_client.post("/v1/department", json={"name": name})

    res = await authorized_client.get("/v1/department", params={"offset": 1})
    assert res.status_code == 200, res.text
    assert [d["name"] for d in res.json()] == ["Sales", "Engineering"]

    res = await authorized_client.get("/v1/department", params={"offset": 0})
    assert res.status_code == 200
    assert len(res.json()) == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"limit": -1}, {"offset": -5}, {"limit": "ten"}])
async def test_search_departments_invalid_paging_is_bad_request(authorized_client: AsyncClient, params):
    res = await authorized_client.get("/v1/department", params=params)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_update_department_name(authorized_client: AsyncClient, department):
    res = await authorized_client.patch(f"/v1/department/{department['departmentId']}", json={"name": "Platform"})
    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "Platform"
    assert body["createdAt"] == department["createdAt"]
    assert datetime.fromisoformat(body["updatedAt"]) > datetime.fromisoformat(department["updatedAt"])


@pytest.mark.asyncio
async def test_update_department_to_existing_name_is_conflict(authorized_client: AsyncClient, department):
    await authorized_client.post("/v1/department", json={"name": "Sales"})
    res = await authorized_client.patch(f"/v1/department/{department['departmentId']}", json={"name": "Sales"})
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_update_department_keeping_same_name_is_allowed(authorized_client: AsyncClient, department):
    res = await authorized_client.patch(f"/v1/department/{department['departmentId']}", json={"name": "Engineering"})
    assert res.status_code == 200


@pytest.mark.asyncio
async def test_update_department_empty_body_and_null_name(authorized_client: AsyncClient, department):
    url = f"/v1/department/{department['departmentId']}"
    res = await authorized_client.patch(url, json={})
    assert res.status_code == 400
    assert res.json() == {"error": "No fields to update"}

    res = await authorized_client.patch(url, json={"name": None})
    assert res.status_code == 400
    assert res.json()["fields"]["name"] == ["null_not_allowed"]


@pytest.mark.asyncio
async def test_update_unknown_department_is_not_found(authorized_client: AsyncClient):
    res = await authorized_client.patch(f"/v1/department/{uuid.uuid4()}", json={"name": "Platform"})
    assert res.status_code == 404
    assert res.json() == {"error": "Department not found"}


@pytest.mark.asyncio
async def test_department_path_must_be_uuid(authorized_client: AsyncClient):
    res = await authorized_client.patch("/v1/department/not-a-uuid", json={"name": "Platform"})
    assert res.status_code == 400
    res = await authorized_client.delete("/v1/department/not-a-uuid")
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_delete_department_with_employees_is_conflict(authorized_client: AsyncClient, department, employee_factory):
    await employee_factory("EMP-0001")

    res = await authorized_client.delete(f"/v1/department/{department['departmentId']}")
    assert res.status_code == 409
    assert res.json() == {"error": "Department still contains employees"}

    res = await authorized_client.delete("/v1/employee/EMP-0001")
    assert res.status_code == 200
    assert res.json() == {"message": "Employee deleted successfully"}

    res = await authorized_client.delete(f"/v1/department/{department['departmentId']}")
    assert res.status_code == 200
    assert res.json() == {"message": "Department deleted successfully"}

    res = await authorized_client.delete(f"/v1/department/{department['departmentId']}")
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_any_authenticated_user_can_manage_departments(client: AsyncClient, department, register_user):
    other = await register_user("bob@example.com")
    res = await client.patch(
        f"/v1/department/{department['departmentId']}",
        json={"name": "Platform"},
        headers={"Authorization": f"Bearer {other['token']}"},
    )
    assert res.status_code == 200


# =============================================================================
# 2. 직원 (Employee)
# =============================================================================
@pytest.mark.asyncio
async def test_create_employee(authorized_client: AsyncClient, department):
    payload = {
        "identityNumber": "EMP-0001",
        "name": "Jane Doe",
        "gender": "female",
        "departmentId": department["departmentId"],
        "employeeImageUri": "http://files.test/uploads/jane.png",
    }
    res = await authorized_client.post("/v1/employee", json=payload)
    assert res.status_code == 201
    body = res.json()
    assert body["identityNumber"] == "EMP-0001"
    assert body["gender"] == "female"
    assert body["departmentId"] == department["departmentId"]
    assert body["employeeImageUri"] == "http://files.test/uploads/jane.png"


@pytest.mark.asyncio
async def test_create_employee_duplicate_identity_number_is_conflict(authorized_client: AsyncClient, department, employee_factory):
    await employee_factory("EMP-0001")
    res = await authorized_client.post(
        "/v1/employee",
        json={"identityNumber": "EMP-0001", "name": "John Roe", "gender": "male", "departmentId": department["departmentId"]},
    )
    assert res.status_code == 409
    assert res.json() == {"error": "Identity number already exists"}


@pytest.mark.asyncio
async def test_create_employee_in_unknown_department_is_not_found(authorized_client: AsyncClient):
    res = await authorized_client.post(
        "/v1/employee",
        json={"identityNumber": "EMP-0001", "name": "Jane Doe", "gender": "female", "departmentId": str(uuid.uuid4())},
    )
    assert res.status_code == 404
    assert res.json() == {"error": "Department not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "override, field",
    [
        ({"identityNumber": "E1"}, "identityNumber"),
        ({"name": "Jo"}, "name"),
        ({"gender": "other"}, "gender"),
        ({"departmentId": "short"}, "departmentId"),
        ({"departmentId": "x" * 36}, "departmentId"),
        ({"employeeImageUri": "not a url"}, "employeeImageUri"),
    ],
)
async def test_create_employee_validation(authorized_client: AsyncClient, department, override, field):
    payload = {"identityNumber": "EMP-0001", "name": "Jane Doe", "gender": "female", "departmentId": department["departmentId"]}
    payload.update(override)
    res = await authorized_client.post("/v1/employee", json=payload)
    assert res.status_code == 400
    assert field in res.json()["fields"]


@pytest.mark.asyncio
async def test_search_employees_by_each_filter(authorized_client: AsyncClient, department, employee_factory):
    other = (await authorized_client.post("/v1/department", json={"name": "Sales"})).json()

    await employee_factory("ENG-001", name="Jane Doe", gender="female")
    await employee_factory("ENG-002", name="John Smith", gender="male")
    await employee_factory("SAL-001", name="Janet Park", gender="female", departmentId=other["departmentId"])

    async def ids(**params):
        res = await authorized_client.get("/v1/employee", params=params)
        assert res.status_code == 200, res.text
        return [e["identityNumber"] for e in res.json()]

    assert await ids() == ["SAL-001", "ENG-002", "ENG-001"]
    assert await ids(identityNumber="eng") == ["ENG-002", "ENG-001"]
    assert await ids(identityNumber="001") == []
    assert await ids(name="JAN") == ["SAL-001", "ENG-001"]
    assert await ids(gender="male") == ["ENG-002"]
    assert await ids(departmentId=other["departmentId"]) == ["SAL-001"]
    assert await ids(gender="female", departmentId=department["departmentId"]) == ["ENG-001"]
    assert await ids(limit=1, offset=1) == ["ENG-002"]
    assert await ids(offset=2) == ["ENG-001"]


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"gender": "other"}, {"departmentId": "abc"}, {"limit": -1}])
async def test_search_employees_invalid_query_is_bad_request(authorized_client: AsyncClient, params):
    res = await authorized_client.get("/v1/employee", params=params)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_update_employee_changes_only_given_fields(authorized_client: AsyncClient, employee_factory):
    created = await employee_factory("EMP-0001", name="Jane Doe", employeeImageUri="http://files.test/uploads/a.png")

    res = await authorized_client.patch("/v1/employee/EMP-0001", json={"name": "Jane Smith"})
    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "Jane Smith"
    for unchanged in ("identityNumber", "gender", "departmentId", "employeeImageUri", "createdAt"):
        assert body[unchanged] == created[unchanged]
    assert datetime.fromisoformat(body["updatedAt"]) > datetime.fromisoformat(created["updatedAt"])


@pytest.mark.asyncio
async def test_update_employee_image_uri_can_be_cleared(authorized_client: AsyncClient, employee_factory):
    await employee_factory("EMP-0001", employeeImageUri="http://files.test/uploads/a.png")
    res = await authorized_client.patch("/v1/employee/EMP-0001", json={"employeeImageUri": None})
    assert res.status_code == 200
    assert res.json()["employeeImageUri"] is None


@pytest.mark.asyncio
async def test_update_employee_identity_number(authorized_client: AsyncClient, employee_factory):
    await employee_factory("EMP-0001")
    await employee_factory("EMP-0002")

    res = await authorized_client.patch("/v1/employee/EMP-0001", json={"identityNumber": "EMP-0002"})
    assert res.status_code == 409

    res = await authorized_client.patch("/v1/employee/EMP-0001", json={"identityNumber": "EMP-9999"})
    assert res.status_code == 200
    assert res.json()["identityNumber"] == "EMP-9999"

    res = await authorized_client.patch("/v1/employee/EMP-0001", json={"name": "Nobody Here"})
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_update_employee_department(authorized_client: AsyncClient, employee_factory):
    await employee_factory("EMP-0001")
    other = (await authorized_client.post("/v1/department", json={"name": "Sales"})).json()

    res = await authorized_client.patch("/v1/employee/EMP-0001", json={"departmentId": other["departmentId"]})
    assert res.status_code == 200
    assert res.json()["departmentId"] == other["departmentId"]

    res = await authorized_client.patch("/v1/employee/EMP-0001", json={"departmentId": str(uuid.uuid4())})
    assert res.status_code == 404
    assert res.json() == {"error": "Department not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, status_code",
    [
        ({}, 400),
        ({"name": None}, 400),
        ({"gender": None}, 400),
        ({"departmentId": None}, 400),
        ({"gender": "unknown"}, 400),
    ],
)
async def test_update_employee_rejected_payloads(authorized_client: AsyncClient, employee_factory, payload, status_code):
    await employee_factory("EMP-0001")
    res = await authorized_client.patch("/v1/employee/EMP-0001", json=payload)
    assert res.status_code == status_code


@pytest.mark.asyncio
async def test_update_unknown_employee_is_not_found(authorized_client: AsyncClient):
    res = await authorized_client.patch("/v1/employee/NOPE-0001", json={"name": "Jane Doe"})
    assert res.status_code == 404
    assert res.json() == {"error": "Employee not found"}


@pytest.mark.asyncio
async def test_delete_employee_twice(authorized_client: AsyncClient, employee_factory):
    await employee_factory("EMP-0001")
    res = await authorized_client.delete("/v1/employee/EMP-0001")
    assert res.status_code == 200
    res = await authorized_client.delete("/v1/employee/EMP-0001")
    assert res.status_code == 404


# =============================================================================
# 3. 동시 요청 경쟁: 사전 확인을 통과한 뒤 저장소 제약이 같은 결과를 내는지
# =============================================================================
async def _always_false(*args, **kwargs):
    return False


async def _skip_lookup(*args, **kwargs):
    return None


@pytest.mark.asyncio
async def test_duplicate_department_name_caught_by_store_constraint(authorized_client: AsyncClient, department, monkeypatch):
    monkeypatch.setattr(hr_crud.department, "name_taken", _always_false)
    res = await authorized_client.post("/v1/department", json={"name": "Engineering"})
    assert res.status_code == 409
    assert res.json() == {"error": "Department name already exists"}


@pytest.mark.asyncio
async def test_duplicate_identity_number_caught_by_store_constraint(authorized_client: AsyncClient, department, employee_factory, monkeypatch):
    await employee_factory("EMP-0001")
    monkeypatch.setattr(hr_crud.employee, "identity_number_taken", _always_false)
    res = await authorized_client.post(
        "/v1/employee",
        json={"identityNumber": "EMP-0001", "name": "John Roe", "gender": "male", "departmentId": department["departmentId"]},
    )
    assert res.status_code == 409
    assert res.json() == {"error": "Identity number already exists"}


@pytest.mark.asyncio
async def test_employee_create_for_vanished_department_is_not_found(authorized_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(hr_crud.department, "get_or_404", _skip_lookup)
    res = await authorized_client.post(
        "/v1/employee",
        json={"identityNumber": "EMP-0001", "name": "Jane Doe", "gender": "female", "departmentId": str(uuid.uuid4())},
    )
    assert res.status_code == 404
    assert res.json() == {"error": "Department not found"}


@pytest.mark.asyncio
async def test_employee_move_to_vanished_department_is_not_found(authorized_client: AsyncClient, employee_factory, monkeypatch):
    created = await employee_factory("EMP-0001")
    monkeypatch.setattr(hr_crud.department, "get_or_404", _skip_lookup)
    res = await authorized_client.patch("/v1/employee/EMP-0001", json={"departmentId": str(uuid.uuid4())})
    assert res.status_code == 404
    assert res.json() == {"error": "Department not found"}

    res = await authorized_client.get("/v1/employee", params={"identityNumber": "EMP-0001"})
    assert res.json()[0]["departmentId"] == created["departmentId"]


@pytest.mark.asyncio
async def test_department_delete_blocked_by_store_foreign_key(authorized_client: AsyncClient, department, employee_factory, monkeypatch):
    await employee_factory("EMP-0001")
    monkeypatch.setattr(hr_crud.employee, "exists", _always_false)
    res = await authorized_client.delete(f"/v1/department/{department['departmentId']}")
    assert res.status_code == 409
    assert res.json() == {"error": "Department still contains employees"}

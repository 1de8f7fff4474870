# staffdesk/core/validation.py

"""
요청 본문(payload) 검증을 담당하는 모듈입니다.

- 필드별 규칙은 Pydantic 타입으로 선언합니다 (길이 제한, 이메일/URL 형식, 열거형, 고정 길이 식별자).
- 검증 실패는 `ValidationFailed`로 변환되며, 필드 이름 → 위반 규칙 목록 매핑을 담습니다.
- 부분 수정(PATCH) 스키마는 모든 필드가 선택이지만, 전달된 필드는 생성 시와 같은 규칙으로 검사합니다.
- 보호된 엔드포인트의 본문은 인증 게이트를 통과한 뒤에만 읽습니다.
"""

import json
import uuid
from typing import Annotated, Any, Callable, Dict, List, Type, TypeVar

from fastapi import Depends, Request
from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, StringConstraints, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from staffdesk.core.dependencies import AuthContext, get_auth_context
from staffdesk.core.exceptions import BadRequest, ValidationFailed

SchemaType = TypeVar("SchemaType", bound=BaseModel)


class APISchema(BaseModel):
    """
    API 요청/응답 스키마의 공통 기반 클래스입니다.
    JSON에서는 camelCase(예: identityNumber), 파이썬에서는 snake_case를 사용합니다.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


# =============================================================================
# 필드 규칙
# =============================================================================
_URL_ADAPTER = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    try:
        url = _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("url", "Value must be a valid URL")
    if not url.host:
        raise PydanticCustomError("url", "Value must be a valid URL")
    return value


def _check_uuid(value: str) -> str:
    try:
        return str(uuid.UUID(value))
    except ValueError:
        raise PydanticCustomError("uuid_shape", "Value must be a 36-character identifier")


def _reject_null(value: Any) -> Any:
    if value is None:
        raise PydanticCustomError("null_not_allowed", "Field may be omitted but cannot be null")
    return value


UrlStr = Annotated[str, AfterValidator(_check_url)]
IdentifierStr = Annotated[str, StringConstraints(min_length=36, max_length=36), AfterValidator(_check_uuid)]

# 선택 필드이지만 명시적 null은 허용하지 않는 컬럼에 사용합니다 (NOT NULL 컬럼).
NotNull = AfterValidator(_reject_null)


def error_map(error: ValidationError) -> Dict[str, List[str]]:
    """Pydantic ValidationError를 필드 → 위반 규칙 목록 매핑으로 변환합니다."""
    fields: Dict[str, List[str]] = {}
    for item in error.errors():
        loc = [str(part) for part in item.get("loc", ()) if not isinstance(part, int)]
        # 중첩 타입(Optional, Annotated 등) 경로의 첫 요소가 필드 이름입니다.
        field = loc[0] if loc else "body"
        rules = fields.setdefault(field, [])
        if item["type"] not in rules:
            rules.append(item["type"])
    return fields


def validate_payload(schema: Type[SchemaType], raw: Any) -> SchemaType:
    """원시 JSON 값을 스키마로 검증합니다. 실패 시 ValidationFailed."""
    try:
        return schema.model_validate(raw)
    except ValidationError as e:
        raise ValidationFailed(error_map(e)) from e


class PartialUpdate(APISchema):
    """
    부분 수정 요청의 기반 스키마입니다.
    요청에 실제로 포함된 필드만 변경 대상으로 취급합니다.
    """

    def changes(self) -> Dict[str, Any]:
        """명시적으로 전달된 필드(snake_case) → 값. 하나도 없으면 BadRequest."""
        data = self.model_dump(exclude_unset=True)
        if not data:
            raise BadRequest("No fields to update")
        return data


async def read_json_body(request: Request) -> Any:
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BadRequest("Malformed JSON body") from e


def json_payload(schema: Type[SchemaType], *, authenticated: bool = True) -> Callable[..., Any]:
    """
    요청 본문을 읽어 스키마로 검증하는 의존성을 만듭니다.
    authenticated=True이면 인증 게이트가 먼저 통과해야 본문을 읽습니다.
    """
    if authenticated:
        async def _authenticated_payload(
            request: Request,
            auth: AuthContext = Depends(get_auth_context),
        ) -> SchemaType:
            return validate_payload(schema, await read_json_body(request))
        return _authenticated_payload

    async def _payload(request: Request) -> SchemaType:
        return validate_payload(schema, await read_json_body(request))
    return _payload

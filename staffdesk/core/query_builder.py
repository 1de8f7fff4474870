# staffdesk/core/query_builder.py

"""
선택적 필드 조합에 따라 WHERE/SET 절이 달라지는 SQL을 안전하게 만드는 빌더 모듈입니다.

빌더는 실제로 전달된 필드에 대해서만 (SQL 조각, 바인딩 값) 쌍을 순서대로 쌓고,
`build()` 시점에 목록 내 위치로 플레이스홀더 이름(:p1, :p2, ...)을 붙입니다.
필드의 스키마상 위치로 번호를 정하지 않으므로, 앞선 선택 필드가 빠져도
뒤 필드의 플레이스홀더와 값이 어긋나지 않습니다.

- SelectBuilder: 필터(WHERE ... AND ...), 정렬, 페이지네이션(LIMIT/OFFSET 바인딩)
- UpdateBuilder: 부분 수정(SET a = .., b = .., updated_at = ..) + WHERE 키 = ..
- DeleteBuilder: 키 기준 단건 삭제

값은 항상 바인딩 파라미터로 전달되며 SQL 문자열에 직접 삽입되지 않습니다.
컬럼 이름은 코드에서만 지정되며 테이블 정의에 존재하는지 검사합니다.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from sqlalchemy import Integer, Table, bindparam, text
from sqlalchemy.sql.elements import ColumnElement, TextClause
from sqlalchemy.sql.selectable import TextualSelect
from sqlalchemy.types import TypeEngine

LIKE_ESCAPE_CHAR = "\\"
_LIKE_SPECIAL = ("\\", "%", "_")
_COMPARISON_OPERATORS = ("=", "<>", "!=", "<", "<=", ">", ">=")

# LIMIT 없이 OFFSET만 쓸 수 없는 방언에서 OFFSET 앞에 붙이는 "상한 없음" 절
_UNBOUNDED_LIMIT = {"sqlite": "LIMIT -1"}


class EmptyUpdateError(ValueError):
    """변경할 필드가 하나도 없는 UPDATE는 만들 수 없습니다."""


def escape_like(value: str) -> str:
    """LIKE 패턴에서 와일드카드 문자(%, _)와 이스케이프 문자를 이스케이프합니다."""
    return "".join(LIKE_ESCAPE_CHAR + ch if ch in _LIKE_SPECIAL else ch for ch in value)


@dataclass(frozen=True)
class BuiltStatement:
    """렌더링된 SQL과 (이름 → 값) 파라미터. 파라미터 순서는 SQL 내 등장 순서와 같습니다."""
    sql: str
    params: Dict[str, Any]
    types: Dict[str, TypeEngine] = field(default_factory=dict, compare=False, repr=False)

    def to_text(self, columns: Optional[Sequence[ColumnElement]] = None) -> Union[TextClause, TextualSelect]:
        """
        컬럼 타입이 지정된 bindparam을 가진 SQLAlchemy TextClause로 변환합니다.
        columns를 주면 결과 컬럼 타입까지 지정된 TextualSelect를 반환합니다 (ORM 매핑용).
        """
        binds = [bindparam(name, value, type_=self.types.get(name)) for name, value in self.params.items()]
        clause = text(self.sql).bindparams(*binds)
        if columns is not None:
            return clause.columns(*columns)
        return clause


@dataclass
class _Term:
    template: str           # "{}" 자리에 플레이스홀더가 들어갑니다
    value: Any
    type_: Optional[TypeEngine] = None


class _StatementBuilder:
    """테이블 컬럼 검증과 위치 기반 플레이스홀더 렌더링을 공통으로 제공합니다."""

    def __init__(self, table: Table):
        self.table = table

    def _column_type(self, column: str) -> TypeEngine:
        if column not in self.table.c:
            raise ValueError(f"Unknown column '{column}' for table '{self.table.name}'")
        return self.table.c[column].type

    @staticmethod
    def _render(terms: Sequence[_Term], start: int = 1) -> Tuple[List[str], Dict[str, Any], Dict[str, TypeEngine]]:
        fragments: List[str] = []
        params: Dict[str, Any] = {}
        types: Dict[str, TypeEngine] = {}
        for position, term in enumerate(terms, start=start):
            name = f"p{position}"
            fragments.append(term.template.format(f":{name}"))
            params[name] = term.value
            if term.type_ is not None:
                types[name] = term.type_
        return fragments, params, types


# =============================================================================
# SELECT
# =============================================================================
class SelectBuilder(_StatementBuilder):
    """
    고정된 기본 절(SELECT ... FROM 테이블)에 선택적 필터를 더합니다.
    `where_*` 메서드는 값이 None(=요청에 없음)이면 아무 조건도 추가하지 않습니다.
    """

    def __init__(self, table: Table, projection: str = "*"):
        super().__init__(table)
        self.projection = projection
        self._filters: List[_Term] = []
        self._order_by: List[str] = []
        self._limit: Optional[_Term] = None
        self._offset: Optional[_Term] = None

    @property
    def filter_count(self) -> int:
        return len(self._filters)

    def where(self, column: str, op: str, value: Any) -> "SelectBuilder":
        if value is None:
            return self
        if op not in _COMPARISON_OPERATORS:
            raise ValueError(f"Unsupported operator '{op}'")
        self._filters.append(_Term(f"{column} {op} {{}}", value, self._column_type(column)))
        return self

    def where_equals(self, column: str, value: Any) -> "SelectBuilder":
        return self.where(column, "=", value)

    def where_not_equals(self, column: str, value: Any) -> "SelectBuilder":
        return self.where(column, "<>", value)

    def where_iequals(self, column: str, value: Optional[str]) -> "SelectBuilder":
        """대소문자 구분 없는 일치 (예: 이메일)."""
        if value is None:
            return self
        self._filters.append(_Term(f"LOWER({column}) = LOWER({{}})", value, self._column_type(column)))
        return self

    def where_contains(self, column: str, value: Optional[str]) -> "SelectBuilder":
        """대소문자 구분 없는 부분 문자열 일치 (이름 필드)."""
        if value is None:
            return self
        return self._like(column, f"%{escape_like(value.lower())}%")

    def where_prefix(self, column: str, value: Optional[str]) -> "SelectBuilder":
        """대소문자 구분 없는 접두사 일치 (식별 번호 필드)."""
        if value is None:
            return self
        return self._like(column, f"{escape_like(value.lower())}%")

    def _like(self, column: str, pattern: str) -> "SelectBuilder":
        self._filters.append(_Term(f"LOWER({column}) LIKE {{}} ESCAPE '{LIKE_ESCAPE_CHAR}'", pattern, self._column_type(column)))
        return self

    def order_by(self, column: str, descending: bool = False) -> "SelectBuilder":
        self._column_type(column)
        self._order_by.append(f"{column} DESC" if descending else f"{column} ASC")
        return self

    def paginate(self, limit: Optional[int] = None, offset: Optional[int] = None) -> "SelectBuilder":
        """LIMIT/OFFSET은 항상 바인딩 파라미터로 마지막에 붙습니다."""
        if limit is not None:
            if limit < 0:
                raise ValueError("limit must be non-negative")
            self._limit = _Term("LIMIT {}", int(limit), Integer())
        if offset is not None:
            if offset < 0:
                raise ValueError("offset must be non-negative")
            self._offset = _Term("OFFSET {}", int(offset), Integer())
        return self

    def build(self, dialect: Optional[str] = None) -> BuiltStatement:
        """
        dialect는 실행할 DB 방언 이름 (예: "sqlite", "postgresql").
        OFFSET만 지정되었을 때 방언이 요구하면 상수 "상한 없음" LIMIT 절을 앞에 붙입니다.
        """
        terms = list(self._filters)
        pagination = [term for term in (self._limit, self._offset) if term is not None]
        fragments, params, types = self._render(terms + pagination)

        where_fragments = fragments[:len(terms)]
        page_fragments = fragments[len(terms):]

        sql = f"SELECT {self.projection} FROM {self.table.name}"
        for index, fragment in enumerate(where_fragments):
            sql += f" {'WHERE' if index == 0 else 'AND'} {fragment}"
        if self._order_by:
            sql += " ORDER BY " + ", ".join(self._order_by)
        if self._limit is None and self._offset is not None and dialect in _UNBOUNDED_LIMIT:
            sql += f" {_UNBOUNDED_LIMIT[dialect]}"
        for fragment in page_fragments:
            sql += f" {fragment}"
        return BuiltStatement(sql=sql, params=params, types=types)


# =============================================================================
# UPDATE
# =============================================================================
class UpdateBuilder(_StatementBuilder):
    """
    요청에 포함된 필드만 SET 절에 넣는 부분 수정 빌더입니다.
    `updated_at` 할당은 항상 마지막 SET 항목이며, `WHERE 키 = ..`는 문장 맨 끝에 붙습니다.
    """

    def __init__(self, table: Table, key_column: str, key_value: Any, timestamp_column: Optional[str] = "updated_at"):
        super().__init__(table)
        self.key_column = key_column
        self.key_value = key_value
        self.timestamp_column = timestamp_column
        self._key_type = self._column_type(key_column)
        if timestamp_column is not None:
            self._column_type(timestamp_column)
        self._assignments: List[_Term] = []
        self._values: Dict[str, Any] = {}

    @property
    def has_assignments(self) -> bool:
        return bool(self._assignments)

    def set(self, column: str, value: Any) -> "UpdateBuilder":
        """필드를 변경 대상에 추가합니다. None은 NULL 할당을 뜻합니다."""
        if column == self.timestamp_column:
            raise ValueError(f"Column '{column}' is maintained by the builder")
        if column in self._values:
            raise ValueError(f"Column '{column}' is already assigned")
        self._assignments.append(_Term(f"{column} = {{}}", value, self._column_type(column)))
        self._values[column] = value
        return self

    def assigned_value(self, column: str, default: Any = None) -> Any:
        """SET 절에 들어간 컬럼의 새 값. 할당되지 않았으면 default."""
        return self._values.get(column, default)

    def set_many(self, values: Dict[str, Any]) -> "UpdateBuilder":
        for column, value in values.items():
            self.set(column, value)
        return self

    def build(self, now: Optional[datetime] = None) -> BuiltStatement:
        if not self._assignments:
            raise EmptyUpdateError("No fields to update")

        terms = list(self._assignments)
        if self.timestamp_column is not None:
            timestamp = now or datetime.now(timezone.utc)
            terms.append(_Term(f"{self.timestamp_column} = {{}}", timestamp, self.table.c[self.timestamp_column].type))
        key_term = _Term(f"{self.key_column} = {{}}", self.key_value, self._key_type)

        fragments, params, types = self._render(terms + [key_term])
        sql = f"UPDATE {self.table.name} SET " + ", ".join(fragments[:-1]) + f" WHERE {fragments[-1]}"
        return BuiltStatement(sql=sql, params=params, types=types)


# =============================================================================
# DELETE
# =============================================================================
class DeleteBuilder(_StatementBuilder):
    def __init__(self, table: Table, key_column: str, key_value: Any):
        super().__init__(table)
        self.key_column = key_column
        self.key_value = key_value
        self._key_type = self._column_type(key_column)

    def build(self) -> BuiltStatement:
        fragments, params, types = self._render([_Term(f"{self.key_column} = {{}}", self.key_value, self._key_type)])
        return BuiltStatement(sql=f"DELETE FROM {self.table.name} WHERE {fragments[0]}", params=params, types=types)

# scripts/create_user.py

import asyncio

import typer
from pydantic import ValidationError

from staffdesk.core.database import engine, get_async_session_context
from staffdesk.core.exceptions import AppError
from staffdesk.core.validation import error_map
from staffdesk.domains.usr import crud as usr_crud
from staffdesk.domains.usr import schemas as usr_schemas

cli = typer.Typer()


async def create_user(email: str, password: str) -> None:
    """
    데이터베이스에 사용자 계정을 생성하는 비동기 함수
    """
    try:
        async with get_async_session_context() as db:
            db_user = await usr_crud.user.create(db, email=email, password=password)
            typer.echo(f"계정이 생성되었습니다: {db_user.email} ({db_user.user_id})")
    finally:
        await engine.dispose()


@cli.command()
def main(
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="이메일을 입력하세요",
        help="생성할 계정의 이메일 주소입니다."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="생성할 계정의 비밀번호입니다. (8~32자)"
    ),
):
    """
    staffdesk 애플리케이션에 새 사용자 계정을 등록합니다.
    API의 가입 요청과 같은 검증 규칙을 적용합니다.
    """
    try:
        request = usr_schemas.AuthRequest(email=email, password=password, action=usr_schemas.AuthAction.CREATE)
    except ValidationError as e:
        for field, rules in error_map(e).items():
            typer.echo(f"오류: {field}: {', '.join(rules)}", err=True)
        raise typer.Exit(code=1)

    try:
        asyncio.run(create_user(request.email, request.password))
    except AppError as e:
        typer.echo(f"오류: {e.message}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()

import typer

from userservice.infrastructure.entrypoints.cli.dependencies import get_db
from userservice.infrastructure.entrypoints.cli.dependencies import get_user_service


async def user_deactivate_logic(user_id: int) -> None:
    async with get_db() as session:
        user_service = get_user_service(session)
        await user_service.deactivate_user(user_id)

    typer.secho(f"User {user_id} deactivated successfully!", fg=typer.colors.GREEN)

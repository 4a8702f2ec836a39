import typer

from userservice.domain.schemas.user import UserResponse


def echo_user(user: UserResponse) -> None:
    status = "active" if user.is_active else "inactive"
    typer.echo(f"[{user.id}] {user.username} <{user.email}> {user.full_name} ({status})")


def echo_users(users: list[UserResponse]) -> None:
    if not users:
        typer.secho("No users found.", fg=typer.colors.YELLOW)
        return

    for user in users:
        echo_user(user)

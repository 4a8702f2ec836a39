import asyncio

import typer

from userservice.infrastructure.entrypoints.cli.commands.users.create import user_create_logic
from userservice.infrastructure.entrypoints.cli.commands.users.deactivate import user_deactivate_logic
from userservice.infrastructure.entrypoints.cli.commands.users.read import user_get_logic
from userservice.infrastructure.entrypoints.cli.commands.users.read import user_list_logic
from userservice.infrastructure.entrypoints.cli.commands.users.read import user_search_logic
from userservice.infrastructure.entrypoints.cli.commands.users.update import user_update_logic
from userservice.infrastructure.entrypoints.cli.parsers import parse_email
from userservice.infrastructure.entrypoints.cli.parsers import parse_full_name
from userservice.infrastructure.entrypoints.cli.parsers import parse_username

app = typer.Typer()


@app.command("create", help="Create a new user.")
def create(
    username: str = typer.Option(..., help="Username (3-50 letters, digits or underscores)", parser=parse_username),
    email: str = typer.Option(..., help="User email address", parser=parse_email),
    full_name: str = typer.Option(..., "--full-name", help="User full name", parser=parse_full_name),
):
    try:
        asyncio.run(user_create_logic(username, email, full_name))
    except Exception as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e


@app.command("get", help="Show a user, by ID or by username.")
def get(
    user_id: int | None = typer.Option(None, "--id", help="User ID"),
    username: str | None = typer.Option(None, help="Username, looked up on the worker pool"),
):
    if (user_id is None) == (username is None):
        raise typer.BadParameter("Provide either --id or --username.")

    try:
        asyncio.run(user_get_logic(user_id=user_id, username=username))
    except Exception as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e


@app.command("update", help="Update some fields of a user.")
def update(
    user_id: int = typer.Option(..., "--id", help="User ID"),
    username: str | None = typer.Option(None, help="New username", parser=parse_username),
    email: str | None = typer.Option(None, help="New email address", parser=parse_email),
    full_name: str | None = typer.Option(None, "--full-name", help="New full name", parser=parse_full_name),
    is_active: bool | None = typer.Option(None, "--active/--inactive", help="Activate or deactivate the user"),
):
    try:
        asyncio.run(
            user_update_logic(
                user_id=user_id,
                username=username,
                email=email,
                full_name=full_name,
                is_active=is_active,
            )
        )
    except typer.BadParameter:
        raise
    except Exception as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e


@app.command("deactivate", help="Deactivate a user (the user is kept but marked inactive).")
def deactivate(user_id: int = typer.Option(..., "--id", help="User ID")):
    try:
        asyncio.run(user_deactivate_logic(user_id))
    except Exception as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e


@app.command("list", help="List the active users.")
def list_active():
    try:
        asyncio.run(user_list_logic())
    except Exception as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e


@app.command("search", help="Search users whose full name contains a fragment (case-sensitive).")
def search(name: str = typer.Option(..., help="Fragment of the full name")):
    try:
        asyncio.run(user_search_logic(name))
    except Exception as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e

import typer

from userservice import __project_name__
from userservice import __version__
from userservice.infrastructure.config.loggers import configure_loggers
from userservice.infrastructure.config.settings.app import app_settings
from userservice.infrastructure.entrypoints.cli.commands.users import app as users_app
from userservice.infrastructure.entrypoints.cli.parsers import validate_log_handlers
from userservice.infrastructure.entrypoints.cli.parsers import validate_log_level

app = typer.Typer(
    name=__project_name__,
    help="Manage the users from the command line.",
    no_args_is_help=True,
)
app.add_typer(users_app, name="users", help="Create, read, update, deactivate and search users.")


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"Userservice Version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show the version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option(
        app_settings.LOG_LEVEL_CLI,
        "--log-level",
        help="Logging level.",
        callback=validate_log_level,
    ),
    log_handlers: list[str] = typer.Option(
        app_settings.LOG_HANDLERS_CLI,
        "--log-handler",
        help="Logging handler(s) to use.",
        callback=validate_log_handlers,
    ),
) -> None:
    configure_loggers(level=log_level, handlers=log_handlers)


if __name__ == "__main__":  # pragma: no cover
    app()

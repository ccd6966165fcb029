from __future__ import annotations

import typer

from .commands import paste_cmd, settings_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="pasty",
        help="pasty CLI",
        no_args_is_help=True,
    )

    app.add_typer(settings_cmd.app, name="settings")
    app.command("info")(paste_cmd.info)
    app.command("get")(paste_cmd.get_paste)
    app.command("create")(paste_cmd.create_paste)
    app.command("update")(paste_cmd.update_paste)
    app.command("delete")(paste_cmd.delete_paste)

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()

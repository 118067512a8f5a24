import rich
import typer
from rich.markup import escape

import textengine.engine
import textengine.parser
from textengine.config import Config
from textengine.errors import TextEngineError

app = typer.Typer(pretty_exceptions_show_locals=False)
app.add_typer(textengine.parser.app)
app.add_typer(textengine.engine.app)


@app.callback()
def configure(
    ctx: typer.Context,
    indent: str = typer.Option("  ", help="indent of continuation lines"),
    log_level: int = typer.Option(
        1, min=0, max=3, envvar="TEXTENGINE_LOG_LEVEL", help="0 nothing, 1 errors, 2 warnings, 3 everything"
    ),
    trim: bool = typer.Option(True, help="trim spaces behind markers"),
    show_disabled: bool = typer.Option(True, "--show-disabled/--hide-disabled", help="show disabled decisions"),
    initial_score: int = typer.Option(0, help="starting score of every tree"),
    abort_on_error: bool = typer.Option(
        True, "--abort-on-error/--keep-going", help="stop on the first script that fails to load"
    ),
):
    ctx.obj = Config(
        output_indent=indent,
        log_level=log_level,
        trim_whitespaces_behind_markers=trim,
        display_disabled_decisions=show_disabled,
        initial_score=initial_score,
        abort_on_error=abort_on_error,
    )


def main():
    try:
        app()
    except TextEngineError as e:
        rich.print(f"[red]{e.kind.value}:[/] {escape(e.message)}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()

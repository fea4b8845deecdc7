import typer
from rich.table import Table

from sexpedit import __version__
from sexpedit.logging_config import reset_logging, setup_logging
from sexpedit.config import get_engine_config
from sexpedit.dialects import DIALECTS
from sexpedit.cli import edit, text
from sexpedit.cli.config import CLIConfig
from sexpedit.cli.output import get_console, print_json

app = typer.Typer()
console = get_console()


# Global CLI callback for flags that apply to all commands
@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: pretty output with trees and colors (also via SEXPEDIT_HUMAN_MODE env var)"
    ),
):
    """
    sexpedit: structural editing for Lisp text

    Machine mode is DEFAULT (JSON results, no formatting).
    Use --human/-H for pretty output.
    """
    if human:
        CLIConfig.set_machine_mode(False)
    else:
        # Machine mode is default - suppress console logging
        reset_logging()
        setup_logging(suppress_console=True)


app.command(name="read")(text.read_cmd)
app.command(name="check")(text.check_cmd)
app.command(name="normalize")(text.normalize_cmd)
app.command(name="balance")(text.balance_cmd)
app.command(name="unmatched")(text.unmatched_cmd)
app.command(name="edit")(edit.edit_cmd)
app.command(name="delete")(edit.delete_cmd)
app.command(name="paste")(edit.paste_cmd)


@app.command()
def version():
    """
    Prints the version of sexpedit.
    """
    if CLIConfig.is_machine_mode():
        print_json({"version": __version__})
    else:
        console.print(f"sexpedit version {__version__}")


@app.command()
def dialects():
    """
    Lists the known dialects and the engine settings in effect.
    """
    if CLIConfig.is_machine_mode():
        print_json({
            "dialects": {
                name: {"extensions": list(d.extensions), "brackets": d.openers}
                for name, d in DIALECTS.items()
            },
            "config": get_engine_config().to_dict(),
        })
        return

    table = Table(title="Dialects")
    table.add_column("Name", style="cyan")
    table.add_column("Extensions")
    table.add_column("Brackets", style="magenta")
    for name, d in DIALECTS.items():
        table.add_row(name, ", ".join(d.extensions), d.openers)
    console.print(table)


if __name__ == "__main__":
    app()

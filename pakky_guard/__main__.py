import logging
import sys

import typer

from .commands import scan as scan_cmd
from .commands.config import config_app
from .utils.formatter import set_agent_mode

app = typer.Typer(help="Pre-execution security scanner for package configuration shell commands.", no_args_is_help=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log parser and scanner details to stderr"),
    agent: bool = typer.Option(False, "--agent", help="Plain output for AI agents"),
):
    logging.basicConfig(
        format="pakky-guard: %(levelname)s %(name)s: %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    set_agent_mode(agent)


app.command("scan")(scan_cmd.scan)
app.command("check")(scan_cmd.check)
app.command("extract")(scan_cmd.extract)
app.command("levels")(scan_cmd.levels)
app.add_typer(config_app)

if __name__ == "__main__":
    app()

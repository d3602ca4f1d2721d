import logging

import typer

from cratenav.common import L, bus, cratenav_operator as nexus
from .commands.children import children_command
from .rendering import CliRenderer, LogLevel

app = typer.Typer(
    name="cratenav",
    help=nexus(L.cli.app.help),
    no_args_is_help=True,
)


@app.callback()
def main(
    loglevel: LogLevel = typer.Option(
        LogLevel.INFO,
        "--loglevel",
        case_sensitive=False,
        help=nexus(L.cli.option.loglevel.help),
    ),
):
    bus.set_renderer(CliRenderer(loglevel))
    if loglevel == LogLevel.DEBUG:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


app.command(name="children", help=nexus(L.cli.command.children.help))(
    children_command
)

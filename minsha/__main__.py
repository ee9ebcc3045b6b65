# Copyright (c) 2024-2025 iiPython

# Modules
import sys
import typing

import click
from pydantic import ValidationError

from . import __version__
from .controller import Searcher, SearchOptions
from .search import NonceCandidate
from .tui import Display

# Initialization
def search_options(function: typing.Callable) -> typing.Callable:
    function = click.option("--iterations", type = int, default = None, help = "Stop each worker after this many nonces")(function)
    function = click.option("--message", default = None, help = "Optional message appended to the username (max 64 characters)")(function)
    return click.option("--username", required = True, help = "Identity every hash is prefixed with")(function)

def load_options(username: str, message: str | None, iterations: int | None) -> SearchOptions:
    try:
        return SearchOptions(username = username, message = message, iterations = iterations)

    except ValidationError as e:
        for error in e.errors():
            click.secho(f"{error['loc'][0]}: {error['msg'].removeprefix('Value error, ')}", fg = "red", err = True)

        sys.exit(1)

def report(options: SearchOptions, minimum: NonceCandidate) -> None:
    click.echo(f"minimum = {options.prefix.decode()}/{minimum.nonce} = {minimum.digest.hex()}")

# Handle CLI
@click.group()
def minsha() -> None:
    """Search for the nonce giving the smallest SHA-256 digest of your username."""
    pass

@minsha.command(help = "Search on a single worker without the live display")
@search_options
def bench(username: str, message: str | None, iterations: int | None) -> None:
    options = load_options(username, message, iterations)
    report(options, Searcher(options, cores = [0], pin_cores = False).bench())

@minsha.command(help = "Search on every core with a live display, press Esc to stop")
@search_options
def run(username: str, message: str | None, iterations: int | None) -> None:
    options = load_options(username, message, iterations)
    with Display(options.prefix.decode()) as display:
        minimum = Searcher(options).run(display)

    report(options, minimum)

@minsha.command(help = "Display version information")
def version() -> None:
    click.echo(f"MINSHA v{__version__}")

if __name__ == "__main__":
    minsha()

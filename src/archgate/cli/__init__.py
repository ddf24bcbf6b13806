"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__

app = typer.Typer(
    name="archgate",
    help=f"archgate {__version__} - architecture metrics and non-regression gate",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# Import subcommands to register them
from .capture import capture as _capture  # noqa: F401, E402
from .check import check as _check  # noqa: F401, E402
from .tighten import tighten as _tighten  # noqa: F401, E402
from .recapture import recapture as _recapture  # noqa: F401, E402
from .analyze import analyze as _analyze  # noqa: F401, E402
from .priority import priority as _priority  # noqa: F401, E402


def main() -> None:
    app()

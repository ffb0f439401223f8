"""Launch the pipealign editor or previewer."""

from __future__ import annotations

import logging

from pipealign.core import _settings  # noqa: F401
from pipealign.core.config import Config
from pipealign.core.log import setup_logs

log = logging.getLogger(__name__)


def launch(args: list[str] | None = None) -> None:
    """Load the configuration and run the requested application."""
    # Set up default logging
    setup_logs()

    config = Config(_help="Display plain-text tables with their columns aligned")
    config.load(args)

    if config.preview:
        from pipealign.preview.app import PreviewApp

        PreviewApp(config).run()
    else:
        from pipealign.edit.app import EditApp

        files = config.files
        if len(files) > 1:
            log.warning("Only the first file will be opened for editing")
        EditApp(config, files[0] if files else None).run()


def main() -> None:
    """Run pipealign from the command line."""
    launch()

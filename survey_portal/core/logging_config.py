from __future__ import annotations

import logging

from survey_portal.core.config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Install the root log handler once per process.

    Streamlit re-executes the script on every interaction, so repeated calls
    only adjust the level instead of stacking handlers.
    """

    global _configured
    resolved = logging.getLevelName((level or settings.log_level).upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    if not _configured:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
        _configured = True
    logging.getLogger("survey_portal").setLevel(resolved)

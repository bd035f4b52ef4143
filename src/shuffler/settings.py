from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .schemas import Settings
from .store import kvstore

logger = logging.getLogger(__name__)


def load_settings(path: Path, defaults: Optional[Settings] = None) -> Settings:
    """
    Load operator settings, overriding DEFAULTS only for keys it knows.

    Never fails: a missing file or a bad value leaves the default in place.
    """
    settings = defaults or Settings()
    path = Path(path)

    # older releases used an xml settings file
    if path.suffix.lower() == ".xml":
        logger.warning("Settings file has .xml extension. That is not the expected format. Continuing anyway")

    try:
        data = kvstore.load(path)
    except OSError as e:
        logger.warning("Settings file unreadable (%s).", e)
        data = None
    if data is None:
        logger.warning("Settings file failed to load. Using defaults.")
        return settings

    settings, rejected = settings.overlay(data)
    for key in rejected:
        logger.warning("Ignoring invalid value for setting %s: %r", key, data[key])

    logger.info("Finished settings file load.")
    return settings

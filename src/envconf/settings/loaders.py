# src/envconf/settings/loaders.py

"""Settings loaders for environment variables and the installation file.

Each loader returns a plain dictionary that the core resolver merges; no
validation happens here.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

from envconf.parser import ConfParser

from . import utils

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

log = logging.getLogger(__name__)


def load_env() -> Mapping[str, Any]:
    """Load settings from ``ENVCONF_*`` environment variables.

    Boolean fields are coerced using the schema; everything else is passed
    through as a string for the schema to validate. Meta variables such as
    ``ENVCONF_CONFIG_FILE`` and names outside the schema are skipped.
    """
    from .core import InstallationSettings  # local import to keep loaders import-light

    config: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(utils.ENV_PREFIX):
            continue
        field_name = key[len(utils.ENV_PREFIX) :].lower()
        if field_name in utils.META_ENV_FIELDS:
            continue
        info = InstallationSettings.model_fields.get(field_name)
        if info is None:
            log.debug("Ignoring unknown environment variable %s", key)
            continue
        if info.annotation is bool:
            config[field_name] = utils.coerce_bool(value)
        else:
            config[field_name] = value
    return config


def load_file(path: Path | None, parser: ConfParser | None = None) -> Mapping[str, Any]:
    """Load the ``main`` section of the installation settings file.

    A missing file (or no configured path) is an empty layer. Malformed
    content raises ``ConfFileError``.
    """
    if path is None:
        return {}
    parser = parser or ConfParser()
    try:
        document = parser.parse_file(path)
    except FileNotFoundError:
        log.debug("No installation settings file at %s", path)
        return {}
    main = document.main
    if main is None:
        return {}
    return {s.name: s.value.text for s in main.settings}

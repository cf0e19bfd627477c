"""Centralized logging configuration for the CLI entry point."""

from __future__ import annotations

import logging
import os

LOG_FORMAT: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_MODULE_LOGGERS: dict[str, str] = {
    "SIMULATION": "Tradle.simulation",
    "SERVICES": "Tradle.services",
    "DATA": "Tradle.data",
}


def configure_logging(
    *,
    level: str = "",
    verbose: bool = False,
    quiet: bool = False,
) -> None:
    """Configure root logger with a consistent format.

    Priority: verbose > quiet > level param > LOG_LEVEL env > INFO default.
    Reads LOG_LEVEL_{AREA} env vars for per-package overrides.
    """
    if verbose:
        effective = logging.DEBUG
    elif quiet:
        effective = logging.WARNING
    elif level:
        effective = getattr(logging, level.upper(), logging.INFO)
    else:
        env_level = os.environ.get("LOG_LEVEL", "INFO")
        effective = getattr(logging, env_level.upper(), logging.INFO)

    logging.basicConfig(level=effective, format=LOG_FORMAT, force=True)

    # yfinance is chatty at INFO about every download
    logging.getLogger("yfinance").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    for key, logger_name in _MODULE_LOGGERS.items():
        env_key = f"LOG_LEVEL_{key}"
        module_level = os.environ.get(env_key)
        if module_level:
            resolved = getattr(logging, module_level.upper(), None)
            if resolved is not None:
                logging.getLogger(logger_name).setLevel(resolved)

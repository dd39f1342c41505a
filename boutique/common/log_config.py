"""
Logging Configuration

All storefront loggers live under the ``boutique`` package logger, which
gets a single stderr handler. The scripts print catalogue tables, JSON
and import SQL on stdout, so log lines never mix with piped output.

The Supabase SDK logs every HTTP request at INFO through httpx. Those
loggers are held at WARNING unless verbose output is requested.
"""

import logging
import sys

# Transport loggers used by the Supabase SDK
HTTP_LOGGERS = ("httpx", "httpcore")


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Attach the stderr handler to the ``boutique`` logger.

    Calling it again replaces the handler instead of adding a second one.

    Args:
        verbose: DEBUG for boutique, and lets httpx request lines through
        quiet: WARNING only (import and viewer scripts' -q)
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)-8s %(name)s: %(message)s"))

    logger = logging.getLogger("boutique")
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)

    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

from __future__ import annotations

import logging
import sys


def configure_logging(*, verbose: bool, quiet: bool) -> None:
    """
    Configure process-wide logging for the `csf` command.

    - Default: INFO
    - --verbose: DEBUG
    - --quiet: WARNING

    Logs go to stderr so `--format json` and `--filenames` output on stdout
    stays machine-readable.
    """

    if quiet and not verbose:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    fmt = "csf: %(message)s"
    if verbose:
        fmt = "csf [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(level=level, format=fmt, stream=sys.stderr, force=True)

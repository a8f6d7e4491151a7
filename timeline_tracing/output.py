"""Output writer — a file path, or stdout when the path is empty."""

import logging
import os
import sys

from timeline_tracing.errors import RenderError

logger = logging.getLogger(__name__)


def write_output(content: str, out_file: str) -> None:
    """Write *content* to *out_file* (truncating), or to stdout if it is ""."""
    if not out_file:
        sys.stdout.write(content)
        sys.stdout.flush()
        return

    dir_path = os.path.dirname(out_file)
    try:
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)
        with open(out_file, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise RenderError(f"Failed to write to the output file {out_file}: {e}") from e
    logger.info("Wrote %d bytes to %s", len(content.encode("utf-8")), out_file)

"""Text post-processing and the external markdown viewer."""
from __future__ import annotations

import logging
import re
import shutil
import subprocess

logger = logging.getLogger(__name__)

STRING_RE = re.compile(r'(“|"|&quot;|&ldquo;)(.+?)(”|"|&quot;|&rdquo;)')
BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


def italicize(text: str) -> str:
    """Wrap quoted runs in markdown emphasis, keeping the quote marks."""
    return STRING_RE.sub(r" _\1\2\3_ ", text)


def normalize_breaks(text: str) -> str:
    return BREAK_RE.sub("\n", text)


def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "chapter"


def open_glow(text: str, wrap: int, viewer: str = "glow") -> int:
    """
    Soft-wrap `text` to min(terminal width, wrap) columns with `fold` and page
    it through the viewer. Returns the viewer's exit code.
    """
    cols = min(shutil.get_terminal_size().columns, wrap)

    folded = subprocess.run(
        ["fold", "-s", "-w", str(cols)],
        input=text,
        capture_output=True,
        text=True,
    )
    if folded.returncode != 0:
        raise RuntimeError(folded.stderr.strip() or "fold failed")

    logger.debug("opening %s at %d columns", viewer, cols + 1)
    result = subprocess.run([viewer, "-p", "-w", str(cols + 1)], input=folded.stdout, text=True)
    return result.returncode

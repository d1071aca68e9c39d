"""
Local file store for generated Markdown artifacts
"""
import logging
import re
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def slugify(text: str, max_length: int = 60) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug[:max_length] or "untitled"


def write_text_file(directory: str, filename: str, content: str) -> str:
    """Write content as UTF-8, creating the directory if needed; returns the path"""
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / filename
    path.write_text(content, encoding="utf-8")
    return str(path)


def read_text_file(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def delete_text_file(path: Optional[str]) -> bool:
    """
    Remove a stored file; returns True when a file was removed

    A missing file is fine. Other failures are logged and leave the file behind.
    """
    if not path:
        return False
    try:
        Path(path).unlink()
    except FileNotFoundError:
        return False
    except OSError:
        logger.exception("Failed to remove stored file %s", path)
        return False
    return True

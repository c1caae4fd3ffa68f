"""Utilities for static file serving with cache busting."""

import os
import hashlib
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def get_file_hash(file_path, length: int = 8) -> str:
    """Hash of a file's content, used as the cache-busting version.

    Falls back to the modification time, then to zeros, when the file cannot
    be read.
    """
    try:
        with open(file_path, 'rb') as f:
            return hashlib.md5(f.read()).hexdigest()[:length]
    except OSError:
        try:
            return str(int(os.stat(file_path).st_mtime))[:length]
        except OSError:
            logger.warning(f"Static file not found for cache busting: {file_path}")
            return "0" * length


def get_static_url(file_path: str, use_cache_busting: bool = True) -> str:
    """URL for a file under static/, e.g. ``css/styles.css``."""
    base_url = f"/static/{file_path}"
    if not use_cache_busting:
        return base_url

    css_version = os.getenv('CSS_VERSION')
    if css_version:
        return f"{base_url}?v={css_version}"
    return f"{base_url}?v={get_file_hash(STATIC_DIR / file_path)}"


def get_css_url() -> str:
    """Versioned URL of the site stylesheet."""
    return get_static_url("css/styles.css")

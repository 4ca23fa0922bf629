"""Stores uploaded question images under the static directory."""

from __future__ import annotations

import logging
from pathlib import Path
import re
import time
import uuid

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class UploadStore:
    def __init__(self, uploads_dir: Path, url_prefix: str = "/static/uploads") -> None:
        self._uploads_dir = uploads_dir
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def uploads_dir(self) -> Path:
        return self._uploads_dir

    def save(self, filename: str, content: bytes) -> str:
        """Write ``content`` under a unique name and return its public URL."""
        self._uploads_dir.mkdir(parents=True, exist_ok=True)
        safe_name = _UNSAFE_CHARS.sub("_", Path(filename or "image").name) or "image"
        stored_name = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{safe_name}"
        (self._uploads_dir / stored_name).write_bytes(content)
        logger.info("Stored upload %s (%s bytes)", stored_name, len(content))
        return f"{self._url_prefix}/{stored_name}"

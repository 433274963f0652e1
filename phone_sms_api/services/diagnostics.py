import asyncio
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class DiagnosticSink(Protocol):
    async def save(self, name: str, html: str) -> str | None: ...


class FileDiagnosticSink:
    """Keeps raw documents on disk for offline debugging. Never raises."""

    def __init__(self, directory: str | Path):
        self._directory = Path(directory)

    def _write(self, name: str, html: str) -> str:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._directory / name
        path.write_text(html, encoding="utf-8")
        return str(path)

    async def save(self, name: str, html: str) -> str | None:
        try:
            return await asyncio.to_thread(self._write, name, html)
        except (OSError, ValueError):
            logger.warning("Could not write diagnostic artifact %s", name, exc_info=True)
            return None

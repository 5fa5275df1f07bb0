"""Reading document content off the event loop."""

from __future__ import annotations

import asyncio
from pathlib import Path

from mdtail.errors import DocumentReadError


class ContentReader:
    """Reads whole documents as text. Nothing is cached between reads."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    async def read(self, path: str) -> str:
        """Read ``path`` in the default executor.

        Raises:
            DocumentReadError: If the file can't be opened or decoded.
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._read_sync, path)
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(path, e) from e

    def _read_sync(self, path: str) -> str:
        return Path(path).read_text(encoding=self.encoding)

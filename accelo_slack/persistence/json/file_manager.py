"""
File system operations for the JSON backend.

Each store owns one JSON file under the store directory. Writes go to a
temporary file first and are moved into place, so readers never see a
half-written file.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger("JSONFileManager")


class FileManager:
    """Locked, atomic reads and writes of JSON files under one root."""

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self._file_locks: dict[str, asyncio.Lock] = {}

    def _get_file_lock(self, file_path: Path) -> asyncio.Lock:
        """Get or create a lock for a specific file path."""
        key = str(file_path)
        if key not in self._file_locks:
            self._file_locks[key] = asyncio.Lock()
        return self._file_locks[key]

    def path_for(self, name: str) -> Path:
        return self.root / f"{name}.json"

    async def read_file(self, file_path: Path, default: Any) -> Any:
        """Read and parse a JSON file; ``default`` when missing or unreadable."""
        async with self._get_file_lock(file_path):
            if not file_path.exists():
                return default

            try:
                content = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
                return json.loads(content)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to read file {file_path}: {e}")
                return default

    async def write_file(self, file_path: Path, data: Any) -> bool:
        """Write data to a JSON file with temp file + replace."""
        async with self._get_file_lock(file_path):
            try:
                file_path.parent.mkdir(parents=True, exist_ok=True)

                temp_file = file_path.with_suffix(file_path.suffix + ".tmp")
                content = json.dumps(data, ensure_ascii=False, indent=2)

                await asyncio.to_thread(temp_file.write_text, content, encoding="utf-8")
                await asyncio.to_thread(temp_file.replace, file_path)

                return True
            except OSError as e:
                logger.error(f"Failed to write file {file_path}: {e}")
                return False

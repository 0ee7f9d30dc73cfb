"""
Measurebook Backend - JSON File Project Store
===============================================

What:  Persists the project collection as one JSON array in a single file.
How:   Async reads and writes through aiofiles. Writes go to a temporary
       sibling file that then replaces the target with os.replace, so readers
       see either the old document or the new one, never a partial write.
Who:   The default store, created in routes/projects.py from settings.data_file.

Failure behavior:
    Read:  missing file, I/O error, invalid JSON, or a non-array document
           → empty collection (logged, never raised)
    Write: transient OSError → retried with tenacity
           still failing, or payload not serializable → StoreError

File layout (2-space indented, UTF-8):
    [
      {
        "id": "...",
        "name": "Kitchen",
        "details": "",
        "records": [ ... ],
        "createdAt": "2024-01-15T12:00:00.000Z",
        "updatedAt": "2024-01-15T12:00:00.000Z"
      }
    ]
"""

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any, List, Optional, Union

import aiofiles
import aiofiles.os
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from measurebook.config import settings
from measurebook.exceptions import StoreError
from measurebook.ids import IdFactory, new_id
from measurebook.store.base import Project, ProjectStore

logger = logging.getLogger(__name__)


class JsonFileProjectStore(ProjectStore):
    """
    File-backed ProjectStore.

    Args:
        path: Location of the JSON document. Parent directories are created
              on the first write.
        write_attempts: Total tries for a write that keeps raising OSError.
        retry_wait: Seconds to wait between those tries.
    """

    def __init__(
        self,
        path: Union[str, Path],
        write_attempts: Optional[int] = None,
        retry_wait: Optional[float] = None,
        id_factory: IdFactory = new_id,
    ):
        super().__init__(id_factory=id_factory)
        self.path = Path(path)
        self.write_attempts = write_attempts or settings.store_write_attempts
        self.retry_wait = settings.store_retry_wait if retry_wait is None else retry_wait

    async def _read_projects(self) -> List[Any]:
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            logger.debug("Data file %s does not exist yet; starting empty", self.path)
            return []
        except OSError as e:
            logger.warning("Could not read data file %s: %s", self.path, str(e))
            return []

        try:
            data = json.loads(content)
        except ValueError as e:
            logger.warning("Data file %s is not valid JSON (%s); treating as empty", self.path, str(e))
            return []

        if not isinstance(data, list):
            logger.warning(
                "Data file %s holds a %s instead of a list; treating as empty",
                self.path,
                type(data).__name__,
            )
            return []
        return data

    async def save_all(self, projects: List[Project]) -> None:
        try:
            payload = json.dumps(projects, indent=2, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            logger.error("Project collection is not serializable: %s", str(e))
            raise StoreError(message="Failed to serialize projects", cause=e)

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(OSError),
                stop=stop_after_attempt(self.write_attempts),
                wait=wait_fixed(self.retry_wait),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    await self._write_atomically(payload)
        except OSError as e:
            logger.error("Failed to write data file %s: %s", self.path, str(e))
            raise StoreError(
                message="Failed to save projects",
                cause=e,
                context={"path": str(self.path)},
            )

        logger.info("Saved %d project(s) to %s", len(projects), self.path)

    async def _write_atomically(self, payload: str) -> None:
        """Write payload to a temp file next to the target, then swap it in."""
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        tmp_path = self.path.with_name(f".{self.path.name}.{uuid.uuid4().hex}.tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError:
            await self._discard(tmp_path)
            raise

    async def _discard(self, tmp_path: Path) -> None:
        try:
            await aiofiles.os.remove(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to clean up temp file %s: %s", tmp_path, str(e))

    async def health_check(self) -> bool:
        """Writable if the data directory (or its nearest existing ancestor) is writable."""
        directory = self.path.parent.resolve()
        while not directory.exists() and directory != directory.parent:
            directory = directory.parent
        return os.access(directory, os.W_OK)

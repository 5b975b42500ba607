"""Asset source - Reads animation directories from disk"""

import asyncio
import aiofiles
from pathlib import Path
from typing import List, Tuple

from models.errors import AssetUnreadableError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.ASSETS)


class AssetSource:
    """
    File-system access for animation assets

    Layout:
        <root>/<name>/metadata.json
        <root>/<name>/art.txt

    Only directories directly under root count as animations. Names that
    resolve outside the root are reported as unknown.
    """

    def __init__(self, root: Path, metadata_file: str = "metadata.json", art_file: str = "art.txt"):
        self.root = Path(root)
        self.metadata_file = metadata_file
        self.art_file = art_file

    def _animation_dir(self, name: str) -> Path:
        return self.root / name

    def _is_inside_root(self, path: Path) -> bool:
        try:
            path.resolve().relative_to(self.root.resolve())
        except ValueError:
            return False
        return path.resolve() != self.root.resolve()

    async def list_names(self) -> List[str]:
        """
        Enumerate animation directory names.

        Returns an empty list when the root is missing or unreadable.
        Order follows the directory listing; it is not sorted.
        """
        def _scan() -> List[str]:
            return [entry.name for entry in self.root.iterdir() if entry.is_dir()]

        try:
            names = await asyncio.to_thread(_scan)
        except OSError as ex:
            log.warn("Cannot list animation root", root=str(self.root), error=str(ex))
            return []

        log.debug(f"Found {len(names)} animation directories", root=str(self.root))
        return names

    async def exists(self, name: str) -> bool:
        """True when `name` is a directory directly under the root."""
        if not name or "/" in name or "\\" in name:
            return False
        path = self._animation_dir(name)
        if not self._is_inside_root(path):
            log.warn("Rejected animation name outside root", name=name)
            return False
        return await asyncio.to_thread(path.is_dir)

    async def _read_text(self, path: Path) -> str:
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                return await f.read()
        except (OSError, UnicodeDecodeError) as ex:
            reason = ex.strerror if isinstance(ex, OSError) and ex.strerror else str(ex)
            raise AssetUnreadableError(path.name, reason) from ex

    async def read(self, name: str) -> Tuple[str, str]:
        """
        Read metadata and art documents for one animation concurrently.

        Returns:
            (metadata_text, art_text)

        Raises:
            AssetUnreadableError: either file is missing or unreadable
        """
        base = self._animation_dir(name)
        results = await asyncio.gather(
            self._read_text(base / self.metadata_file),
            self._read_text(base / self.art_file),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        metadata_text, art_text = results
        return metadata_text, art_text

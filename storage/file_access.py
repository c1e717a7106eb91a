"""Dateizugriff als austauschbarer Kollaborateur.

Die Stores sprechen nur mit dem FileAccess-Protokoll; die Standard-
Implementierung arbeitet auf dem lokalen Dateisystem unterhalb eines
Basisverzeichnisses.
"""

import asyncio
from pathlib import Path
from typing import Protocol


class FileAccess(Protocol):
    async def exists(self, path: str) -> bool: ...

    async def read_file(self, path: str) -> str: ...

    async def write_file(self, path: str, text: str) -> None: ...


class LocalFileAccess:
    """FileAccess auf dem lokalen Dateisystem (Pfade relativ zu base_dir)."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    def resolve(self, path: str) -> Path:
        return self.base_dir / path

    async def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    async def read_file(self, path: str) -> str:
        return await asyncio.to_thread(self._read, self.resolve(path))

    async def write_file(self, path: str, text: str) -> None:
        await asyncio.to_thread(self._write, self.resolve(path), text)

    @staticmethod
    def _read(target: Path) -> str:
        with open(target, "r", encoding="utf-8") as f:
            return f.read()

    @staticmethod
    def _write(target: Path, text: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            f.write(text)

    def __repr__(self) -> str:
        return f"LocalFileAccess({self.base_dir})"

"""Filesystem helpers shared by tests."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass
class WorkspaceBuilder:
    """Helper bound to a tmp directory for writing config files."""

    root: Path

    def write(self, relative: Union[str, Path], content: str) -> Path:
        path = self.root / Path(relative)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def data_home(self) -> Path:
        return self.root / "data-home"

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_CONFIG_DIR = "SYNCAT_CONFIG_DIR"


@dataclass(frozen=True)
class SyncatConfig:
    config_dir: Path = Path("~/.config/syncat").expanduser()
    stylesheet_suffix: str = ".syncat"
    grammar_suffix: str = ".lark"
    jobs: int = 4

    @classmethod
    def from_env(cls) -> SyncatConfig:
        override = os.environ.get(ENV_CONFIG_DIR)
        if override:
            return cls(config_dir=Path(override).expanduser())
        return cls()

    @property
    def style_dir(self) -> Path:
        return self.config_dir / "style" / "active"

    @property
    def grammar_dir(self) -> Path:
        return self.config_dir / "grammar"

    @property
    def meta_file(self) -> Path:
        return self.style_dir / self.stylesheet_suffix

    def stylesheet_for(self, extension: str) -> Path | None:
        """The active stylesheet for files with *extension* (e.g. ``"py"``), if any."""
        path = self.style_dir / f"{extension.lstrip('.')}{self.stylesheet_suffix}"
        return path if path.is_file() else None

    def grammar_for(self, extension: str) -> Path | None:
        """The Lark grammar for files with *extension*, if any."""
        path = self.grammar_dir / f"{extension.lstrip('.')}{self.grammar_suffix}"
        return path if path.is_file() else None

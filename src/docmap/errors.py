# src/docmap/errors.py

from __future__ import annotations

from pathlib import Path


class ConfigMalformed(ValueError):
    """Fatal error in a namespace URL table. Raised at load time only."""

    def __init__(self, message: str, *, source: Path | str | None = None, index: int | None = None):
        self.source = source
        self.index = index
        self.reason = message
        super().__init__(self._format())

    def _format(self) -> str:
        where = []
        if self.source is not None:
            where.append(str(self.source))
        if self.index is not None:
            where.append(f"entry {self.index}")
        if where:
            return f"{': '.join(where)}: {self.reason}"
        return self.reason

    def with_source(self, source: Path | str) -> ConfigMalformed:
        return ConfigMalformed(self.reason, source=source, index=self.index)

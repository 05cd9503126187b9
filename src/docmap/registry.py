# src/docmap/registry.py
"""Namespace URL registry.

Holds the ordered (namespace, base URL) table a documentation generator uses
to turn symbol references into links. The table is built once and is read-only
afterwards, so a single instance can be shared by any number of readers.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .enums import DuplicatePolicy
from .errors import ConfigMalformed

_NAMESPACE_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class NamespaceURLEntry(BaseModel):
    """One row of the table: a namespace and the root URL of its documentation."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    namespace: str = Field(min_length=1)
    base_url: str = Field(min_length=1)

    @field_validator("namespace")
    @classmethod
    def _check_namespace(cls, value: str) -> str:
        if not _NAMESPACE_RE.fullmatch(value):
            raise ValueError(f"namespace {value!r} is not a valid identifier")
        return value

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"base URL {value!r} is not absolute")
        return value

    def as_pair(self) -> list[str]:
        return [self.namespace, self.base_url]


def _entry_from_pair(pair: Any, index: int) -> NamespaceURLEntry:
    if isinstance(pair, str | bytes) or not isinstance(pair, Sequence):
        raise ConfigMalformed(f"expected a [namespace, baseURL] pair, got {type(pair).__name__}", index=index)
    if len(pair) != 2:
        raise ConfigMalformed(f"expected a [namespace, baseURL] pair, got {len(pair)} element(s)", index=index)

    namespace, base_url = pair
    try:
        return NamespaceURLEntry(namespace=namespace, base_url=base_url)
    except ValidationError as e:
        details = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        raise ConfigMalformed(details, index=index) from e


@dataclass(frozen=True, slots=True)
class NamespaceRegistry:
    """Immutable ordered table of namespace base URLs with exact-key lookup."""

    entries: tuple[NamespaceURLEntry, ...] = ()
    _index: Mapping[str, NamespaceURLEntry] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, NamespaceURLEntry] = {}
        for i, entry in enumerate(self.entries):
            if entry.namespace in index:
                raise ConfigMalformed(f"duplicate namespace {entry.namespace!r}", index=i)
            index[entry.namespace] = entry
        object.__setattr__(self, "entries", tuple(self.entries))
        object.__setattr__(self, "_index", MappingProxyType(index))

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Any],
        on_duplicate: DuplicatePolicy = DuplicatePolicy.reject,
    ) -> NamespaceRegistry:
        """Build a registry from ``[namespace, baseURL]`` pairs.

        Args:
            pairs: Declaration-ordered pairs, as read from static configuration
            on_duplicate: What to do when a namespace repeats

        Returns:
            The registry, in declaration order

        Raises:
            ConfigMalformed: If an entry is not a pair of valid strings, or a
                namespace repeats under ``DuplicatePolicy.reject``
        """
        if isinstance(pairs, str | bytes | Mapping) or not isinstance(pairs, Iterable):
            raise ConfigMalformed(f"expected a list of pairs, got {type(pairs).__name__}")

        ordered: dict[str, NamespaceURLEntry] = {}
        for i, pair in enumerate(pairs):
            entry = _entry_from_pair(pair, i)
            if entry.namespace not in ordered:
                ordered[entry.namespace] = entry
                continue

            if on_duplicate == DuplicatePolicy.reject:
                raise ConfigMalformed(f"duplicate namespace {entry.namespace!r}", index=i)
            if on_duplicate == DuplicatePolicy.last_wins:
                # dict assignment keeps the original insertion position
                ordered[entry.namespace] = entry

        return cls(tuple(ordered.values()))

    def lookup(self, namespace: str) -> str | None:
        entry = self._index.get(namespace)
        return entry.base_url if entry is not None else None

    def all(self) -> tuple[NamespaceURLEntry, ...]:
        return self.entries

    def namespaces(self) -> list[str]:
        return [e.namespace for e in self.entries]

    def as_pairs(self) -> list[list[str]]:
        return [e.as_pair() for e in self.entries]

    def resolve(self, reference: str) -> tuple[str, str] | None:
        """Find the namespace owning a dotted symbol reference like ``Gtk.Widget.show``."""
        namespace = reference.split(".", 1)[0]
        base_url = self.lookup(namespace)
        if base_url is None:
            return None
        return namespace, base_url

    def lint(self) -> list[str]:
        findings = []
        for e in self.entries:
            if not e.base_url.endswith("/"):
                findings.append(f"{e.namespace}: base URL {e.base_url!r} does not end with '/'")
        return findings

    def __getitem__(self, namespace: str) -> str:
        return self._index[namespace].base_url

    def __contains__(self, namespace: object) -> bool:
        return namespace in self._index

    def __iter__(self) -> Iterator[NamespaceURLEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

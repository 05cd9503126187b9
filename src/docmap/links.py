# src/docmap/links.py
"""gi-docgen style cross-reference resolution.

References look like ``[class@Gtk.Widget]``, ``[method@Gtk.Widget.show]``,
``[property@Gtk.Widget:visible]`` or ``[signal@Gtk.Widget::destroy]``. The
leading namespace picks the base URL from the registry; the kind and symbol
pick the page below it.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from urllib.parse import urljoin

import typer

from .registry import NamespaceRegistry

# kind@Namespace.Symbol with optional :property or ::signal member
_REF_BODY = r"(?P<kind>[a-z_]+)@(?P<target>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)+(?P<member>::?[A-Za-z_][A-Za-z0-9_-]*)?)"
_REF_RE = re.compile(rf"^\[?{_REF_BODY}\]?$")
_INLINE_REF_RE = re.compile(rf"\[{_REF_BODY}\](?!\()")
# fenced block (closed, or running to end of text), then inline code span
_CODE_RE = re.compile(
    r"^(?P<fence>`{3,}|~{3,})[^\n]*\n.*?^(?P=fence)[ \t]*$"
    r"|^(?:`{3,}|~{3,}).*\Z"
    r"|(?P<ticks>`+)[^`].*?(?P=ticks)",
    re.MULTILINE | re.DOTALL,
)

TYPE_KINDS = frozenset({"alias", "callback", "class", "const", "enum", "error", "flags", "iface", "struct"})
MEMBER_KINDS = frozenset({"method", "ctor", "vfunc"})
MEMBER_SEPARATORS = {"property": ":", "signal": "::"}


@dataclass(frozen=True, slots=True)
class Reference:
    kind: str
    namespace: str
    path: tuple[str, ...]
    member: str | None = None
    separator: str = ""
    text: str = ""


def _from_match(m: re.Match[str]) -> Reference:
    target = m.group("target")
    member_part = m.group("member")
    member = None
    separator = ""
    if member_part:
        target = target[: -len(member_part)]
        member = member_part.lstrip(":")
        separator = member_part[: len(member_part) - len(member)]

    namespace, *path = target.split(".")
    return Reference(
        kind=m.group("kind"),
        namespace=namespace,
        path=tuple(path),
        member=member,
        separator=separator,
        text=m.group("target"),
    )


def parse_reference(text: str) -> Reference | None:
    m = _REF_RE.match(text.strip())
    if not m:
        return None
    return _from_match(m)


def iter_references(text: str) -> Iterator[Reference]:
    for m in _INLINE_REF_RE.finditer(text):
        yield _from_match(m)


def page_for(ref: Reference) -> str | None:
    """Relative page name for a reference, or None for kinds with no fixed page."""
    path = ref.path

    if ref.kind in TYPE_KINDS and len(path) == 1 and ref.member is None:
        return f"{ref.kind}.{path[0]}.html"

    if ref.kind == "func" and ref.member is None:
        if len(path) == 1:
            return f"func.{path[0]}.html"
        if len(path) == 2:
            return f"type_func.{path[0]}.{path[1]}.html"
        return None

    if ref.kind in MEMBER_KINDS and len(path) == 2 and ref.member is None:
        return f"{ref.kind}.{path[0]}.{path[1]}.html"

    if ref.kind in MEMBER_SEPARATORS and len(path) == 1 and ref.separator == MEMBER_SEPARATORS[ref.kind]:
        return f"{ref.kind}.{path[0]}.{ref.member}.html"

    return None


def link_for(ref: Reference | str, registry: NamespaceRegistry) -> str | None:
    """Absolute URL for a reference. None when the namespace is unknown or the kind unsupported."""
    if isinstance(ref, str):
        parsed = parse_reference(ref)
        if parsed is None:
            return None
        ref = parsed

    base_url = registry.lookup(ref.namespace)
    if base_url is None:
        return None

    page = page_for(ref)
    if page is None:
        return None
    return urljoin(base_url, page)


def rewrite_links(text: str, registry: NamespaceRegistry, verbose: int = 0) -> tuple[str, int]:
    """Turn resolvable references in Markdown text into links.

    References that cannot be resolved are left as written.

    Returns:
        (rewritten_text, number_of_links_created)
    """
    count = 0

    def _sub(m: re.Match[str]) -> str:
        nonlocal count
        ref = _from_match(m)
        url = link_for(ref, registry)
        if url is None:
            if verbose >= 2:
                typer.echo(f"[link] unresolved {m.group(0)}")
            return m.group(0)
        count += 1
        if verbose >= 3:
            typer.echo(f"[link] {m.group(0)} -> {url}")
        return f"[{ref.text}]({url})"

    # code spans and fenced blocks are copied verbatim
    parts = []
    pos = 0
    for code in _CODE_RE.finditer(text):
        parts.append(_INLINE_REF_RE.sub(_sub, text[pos : code.start()]))
        parts.append(code.group(0))
        pos = code.end()
    parts.append(_INLINE_REF_RE.sub(_sub, text[pos:]))
    result = "".join(parts)

    if verbose:
        typer.echo(f"[link] rewrote {count} reference(s)")
    return result, count

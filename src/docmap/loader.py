# src/docmap/loader.py
"""
Loading and writing namespace URL tables.

Handles JSON, YAML and gi-docgen urlmap.js sources.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import typer
import yaml

from .enums import DuplicatePolicy, OutputFormat
from .errors import ConfigMalformed
from .registry import NamespaceRegistry
from .utils import write_if_changed

_SUFFIX_FORMATS = {
    ".json": OutputFormat.json,
    ".yaml": OutputFormat.yaml,
    ".yml": OutputFormat.yaml,
    ".js": OutputFormat.js,
    ".txt": OutputFormat.text,
}

_TABLE_KEY = "baseURLs"

_JS_TOKEN_RE = re.compile(
    r"""(?P<string>"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*')|/\*.*?\*/|//[^\n]*""",
    re.DOTALL,
)
_ASSIGNMENT_RE = re.compile(
    rf"^\s*(?:(?:var|let|const)\s+)?{_TABLE_KEY}\s*=\s*(\[.*\])\s*;?\s*$",
    re.DOTALL,
)


def format_for_path(path: Path) -> OutputFormat:
    try:
        return _SUFFIX_FORMATS[path.suffix.lower()]
    except KeyError:
        raise ConfigMalformed(f"unsupported table format {path.suffix!r}", source=path) from None


def load_yaml_safe(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def parse_urlmap_js(text: str, source: Path | str | None = None) -> list[Any]:
    """Extract the ``baseURLs`` array from a gi-docgen urlmap.js file.

    The array literal is a YAML flow sequence as long as it only holds quoted
    strings, which is all a urlmap carries.
    """
    # string literals are matched first so "https://..." never reads as a comment
    stripped = _JS_TOKEN_RE.sub(lambda t: t.group("string") or "", text)
    m = _ASSIGNMENT_RE.match(stripped)
    if not m:
        raise ConfigMalformed(f"no '{_TABLE_KEY} = [...]' assignment found", source=source)

    try:
        pairs = yaml.safe_load(m.group(1))
    except yaml.YAMLError as e:
        raise ConfigMalformed(f"cannot parse {_TABLE_KEY} array: {e}", source=source) from e

    if not isinstance(pairs, list):
        raise ConfigMalformed(f"{_TABLE_KEY} is not an array", source=source)
    return pairs


def _extract_pairs(data: Any, source: Path) -> Any:
    if isinstance(data, dict):
        if _TABLE_KEY not in data:
            raise ConfigMalformed(f"object has no {_TABLE_KEY!r} key", source=source)
        data = data[_TABLE_KEY]
    if not isinstance(data, list):
        raise ConfigMalformed(f"expected a list of pairs, got {type(data).__name__}", source=source)
    return data


def read_pairs(path: Path) -> list[Any]:
    fmt = format_for_path(path)

    try:
        if fmt == OutputFormat.json:
            data = json.loads(path.read_text(encoding="utf-8"))
        elif fmt == OutputFormat.yaml:
            data = load_yaml_safe(path)
        elif fmt == OutputFormat.js:
            return parse_urlmap_js(path.read_text(encoding="utf-8"), source=path)
        else:
            data = [line.split(None, 1) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]
    except json.JSONDecodeError as e:
        raise ConfigMalformed(f"invalid JSON: {e}", source=path) from e
    except yaml.YAMLError as e:
        raise ConfigMalformed(f"invalid YAML: {e}", source=path) from e
    except UnicodeDecodeError as e:
        raise ConfigMalformed(f"not valid UTF-8: {e}", source=path) from e
    except OSError as e:
        raise ConfigMalformed(f"cannot read table: {e.strerror or e}", source=path) from e

    return _extract_pairs(data, path)


def load_registry(
    path: Path,
    on_duplicate: DuplicatePolicy = DuplicatePolicy.reject,
    verbose: int = 0,
) -> NamespaceRegistry:
    """Load a namespace URL table from a static configuration file.

    Args:
        path: .json, .yaml/.yml, .js (urlmap) or .txt table
        on_duplicate: Precedence rule for repeated namespaces
        verbose: Verbosity level

    Returns:
        Immutable registry in declaration order

    Raises:
        ConfigMalformed: If the file cannot be parsed or an entry is invalid
        FileNotFoundError: If path doesn't exist
    """
    if not path.exists():
        raise FileNotFoundError(f"URL map not found: {path}")

    pairs = read_pairs(path)
    try:
        registry = NamespaceRegistry.from_pairs(pairs, on_duplicate)
    except ConfigMalformed as e:
        raise e.with_source(path) from e

    if verbose:
        typer.echo(f"[load] {len(registry)} namespace(s) from {path}")
    if verbose >= 2:
        for entry in registry:
            typer.echo(f"[load]   {entry.namespace} -> {entry.base_url}")

    return registry


def render(registry: NamespaceRegistry, fmt: OutputFormat) -> str:
    pairs = registry.as_pairs()

    if fmt == OutputFormat.json:
        return json.dumps({_TABLE_KEY: pairs}, indent=2, ensure_ascii=False) + "\n"
    if fmt == OutputFormat.yaml:
        return yaml.safe_dump({_TABLE_KEY: pairs}, sort_keys=False, allow_unicode=True)
    if fmt == OutputFormat.js:
        # json.dumps gives double-quoted strings, valid for both JS and the YAML reader
        lines = [f"    [ {json.dumps(ns)}, {json.dumps(url)} ]," for ns, url in pairs]
        return f"{_TABLE_KEY} = [\n" + "\n".join(lines) + ("\n" if lines else "") + "];\n"

    width = max((len(ns) for ns, _ in pairs), default=0)
    return "".join(f"{ns:<{width}}  {url}\n" for ns, url in pairs)


def dump_registry(registry: NamespaceRegistry, path: Path, fmt: OutputFormat | None = None) -> bool:
    """Write the table to path. Returns False when the file already matched."""
    if fmt is None:
        fmt = format_for_path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return write_if_changed(path, render(registry, fmt))

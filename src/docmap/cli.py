#!/usr/bin/env python3
# src/docmap/cli.py


from __future__ import annotations

from pathlib import Path

import typer

from .config import ENV_URLMAP, RegistryConfig, build_registry
from .enums import DuplicatePolicy, OutputFormat
from .errors import ConfigMalformed
from .links import rewrite_links
from .loader import dump_registry, render
from .registry import NamespaceRegistry
from .utils import write_if_changed

app = typer.Typer(
    name="docmap",
    help="Resolve documentation namespaces to their published base URLs.",
    add_completion=False,
)


def _verbosity_callback(value: int):
    return max(0, min(value, 3))


_URLMAP_OPTION = typer.Option(
    None,
    "--urlmap",
    envvar=ENV_URLMAP,
    help="Namespace table (.json, .yaml, .js urlmap or .txt); built-in GNOME table if unset",
)
_ON_DUPLICATE_OPTION = typer.Option(
    DuplicatePolicy.reject,
    "--on-duplicate",
    help="Repeated namespaces: reject (default), last-wins, first-wins",
    case_sensitive=False,
)
_VERBOSE_OPTION = typer.Option(0, "--verbose", "-v", count=True, callback=_verbosity_callback)


def _load(urlmap: Path | None, on_duplicate: DuplicatePolicy, verbose: int) -> NamespaceRegistry:
    cfg = RegistryConfig(urlmap=urlmap, on_duplicate=on_duplicate, verbose=verbose)
    try:
        return build_registry(cfg)
    except (ConfigMalformed, FileNotFoundError) as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2) from e


@app.command()
def info() -> None:
    print("docmap commands")
    print("-" * 72)
    print(f"{'Command':<12} {'Purpose'}")
    print("-" * 72)
    print(f"{'lookup':<12} {'Print the base URL of one namespace (exit 1 if unknown)'}")
    print(f"{'list':<12} {'Print every namespace and base URL in declaration order'}")
    print(f"{'validate':<12} {'Load the table and report malformed or suspicious entries'}")
    print(f"{'export':<12} {'Write the table as json, yaml, js (urlmap) or text'}")
    print(f"{'link':<12} {'Rewrite [kind@Namespace.Symbol] references in Markdown'}")
    print("-" * 72)
    print("\nExamples:")
    print("  docmap lookup GLib")
    print("  docmap validate --urlmap doc/urlmap.js --strict")
    print("  docmap export --urlmap doc/urlmap.js --format yaml --output urlmap.yaml")
    print("  docmap link README.md --in-place")
    print(f"\nSet {ENV_URLMAP} to use a table without passing --urlmap.")


@app.command()
def lookup(
    namespace: str = typer.Argument(..., help="Namespace to resolve, e.g. GLib"),
    urlmap: Path | None = _URLMAP_OPTION,
    on_duplicate: DuplicatePolicy = _ON_DUPLICATE_OPTION,
    verbose: int = _VERBOSE_OPTION,
) -> None:
    registry = _load(urlmap, on_duplicate, verbose)

    base_url = registry.lookup(namespace)
    if base_url is None:
        typer.secho(f"{namespace}: no base URL registered", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(1)

    typer.echo(base_url)


@app.command("list")
def list_entries(
    urlmap: Path | None = _URLMAP_OPTION,
    on_duplicate: DuplicatePolicy = _ON_DUPLICATE_OPTION,
    verbose: int = _VERBOSE_OPTION,
) -> None:
    registry = _load(urlmap, on_duplicate, verbose)
    typer.echo(render(registry, OutputFormat.text), nl=False)


@app.command()
def validate(
    urlmap: Path | None = _URLMAP_OPTION,
    on_duplicate: DuplicatePolicy = _ON_DUPLICATE_OPTION,
    strict: bool = typer.Option(False, "--strict", help="Treat lint findings (e.g. missing trailing '/') as errors"),
    verbose: int = _VERBOSE_OPTION,
) -> None:
    registry = _load(urlmap, on_duplicate, verbose)

    findings = registry.lint()
    for finding in findings:
        typer.echo(f"[lint] {finding}")

    if findings and strict:
        print(f"\n❌ Found {len(findings)} lint finding(s)")
        raise typer.Exit(1)

    print(f"✅ Validated {len(registry)} namespace(s)")


@app.command()
def export(
    urlmap: Path | None = _URLMAP_OPTION,
    on_duplicate: DuplicatePolicy = _ON_DUPLICATE_OPTION,
    fmt: OutputFormat | None = typer.Option(
        None,
        "--format",
        help="json|yaml|js|text (default: from --output suffix, else json)",
        case_sensitive=False,
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write here instead of stdout"),
    verbose: int = _VERBOSE_OPTION,
) -> None:
    registry = _load(urlmap, on_duplicate, verbose)

    if output is None:
        typer.echo(render(registry, fmt or OutputFormat.json), nl=False)
        return

    try:
        changed = dump_registry(registry, output, fmt)
    except ConfigMalformed as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2) from e

    print(f"Wrote {output}" if changed else f"{output} is up to date")


@app.command()
def link(
    markdown: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markdown file to rewrite"),
    urlmap: Path | None = _URLMAP_OPTION,
    on_duplicate: DuplicatePolicy = _ON_DUPLICATE_OPTION,
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Rewrite the file instead of printing"),
    verbose: int = _VERBOSE_OPTION,
) -> None:
    registry = _load(urlmap, on_duplicate, verbose)

    text = markdown.read_text(encoding="utf-8")
    rewritten, count = rewrite_links(text, registry, verbose=verbose)

    if not in_place:
        typer.echo(rewritten, nl=False)
        return

    if write_if_changed(markdown, rewritten):
        print(f"Linked {count} reference(s) in {markdown}")
    else:
        print(f"{markdown}: nothing to link")


if __name__ == "__main__":
    app()

# src/docmap/defaults.py
"""Stock GNOME platform documentation table."""

from __future__ import annotations

from functools import cache

from .registry import NamespaceRegistry

DEFAULT_BASE_URLS: tuple[tuple[str, str], ...] = (
    ("GLib", "https://docs.gtk.org/glib/"),
    ("GObject", "https://docs.gtk.org/gobject/"),
    ("Gio", "https://docs.gtk.org/gio/"),
    ("Gtk", "https://docs.gtk.org/gtk4/"),
    ("Gdk", "https://docs.gtk.org/gdk4/"),
    ("Gsk", "https://docs.gtk.org/gsk4/"),
    ("Pango", "https://docs.gtk.org/Pango/"),
    ("Adw", "https://gnome.pages.gitlab.gnome.org/libadwaita/doc/main/"),
    ("GtkSource", "https://gnome.pages.gitlab.gnome.org/gtksourceview/gtksourceview5/"),
    ("Json", "https://gnome.pages.gitlab.gnome.org/json-glib/"),
)


@cache
def default_registry() -> NamespaceRegistry:
    return NamespaceRegistry.from_pairs(DEFAULT_BASE_URLS)

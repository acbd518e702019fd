"""
Sass-family renderer (``.scss`` / ``.sass``) backed by ``libsass``.

Imports prefixed with ``~`` are resolved under the project's dependency
directory instead of relative to the importing stylesheet, so
``@import "~some-lib/x";`` loads ``<root>/node_modules/some-lib/_x.scss``
(or any other valid Sass candidate for that path).
"""

import asyncio
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import sass

from component_packager.styles.renderers.base import RenderRequest, StylesheetRenderer
from component_packager.utils.console import log_debug

_SASS_SUFFIXES = (".scss", ".sass", ".css")


def _candidates(base: Path) -> List[Path]:
  """Lists the files Sass would try for an import path, in lookup order."""
  if base.suffix in _SASS_SUFFIXES:
    return [base, base.with_name(f"_{base.name}")]

  found = []
  for suffix in _SASS_SUFFIXES:
    found.append(base.with_name(f"{base.name}{suffix}"))
    found.append(base.with_name(f"_{base.name}{suffix}"))
  for suffix in _SASS_SUFFIXES[:2]:
    found.append(base / f"index{suffix}")
    found.append(base / f"_index{suffix}")
  return found


def resolve_tilde_import(url: str, dependency_dir: Path) -> Optional[Path]:
  """
  Maps a ``~``-prefixed Sass import onto the dependency directory.

  Args:
      url: The import URL as written in the stylesheet.
      dependency_dir: Absolute dependency directory (e.g. ``<root>/node_modules``).

  Returns:
      Optional[Path]: ``None`` for ordinary imports. For ``~`` imports, the first
      existing Sass candidate, or the plain mapped path if nothing exists yet.
  """
  if not url.startswith("~"):
    return None

  base = (dependency_dir / url[1:].lstrip("/")).resolve()
  for candidate in _candidates(base):
    if candidate.is_file():
      return candidate
  return base


def make_importer(dependency_dir: Path) -> Callable[[str], Optional[List[Tuple[str, str]]]]:
  """
  Builds the libsass importer callback for ``~`` module resolution.

  Returning ``None`` lets libsass fall back to its default relative lookup.
  """

  def importer(url: str) -> Optional[List[Tuple[str, str]]]:
    resolved = resolve_tilde_import(url, dependency_dir)
    if resolved is None:
      return None
    if not resolved.is_file():
      raise FileNotFoundError(f"Cannot resolve '{url}' under {dependency_dir}")
    return [(str(resolved), resolved.read_text(encoding="utf-8"))]

  return importer


class SassRenderer(StylesheetRenderer):
  """Renders SCSS and indented Sass files."""

  extensions = (".scss", ".sass")

  async def render(self, request: RenderRequest) -> str:
    log_debug(f"rendering sass for {request.path}")
    return await asyncio.to_thread(
      sass.compile,
      filename=str(request.path),
      importers=[(0, make_importer(request.dependency_dir))],
      output_style="expanded",
    )

"""
Renderer Dispatcher.

Selects exactly one stylesheet engine by file extension. Unknown extensions
are treated as plain CSS and passed through. There is no fallback between
engines and no retry: an engine error propagates to the caller.
"""

from pathlib import Path
from typing import Dict, Optional, Type

from component_packager.config import PackagerSettings
from component_packager.enums import StylesheetFormat
from component_packager.styles.renderers import (
  CssRenderer,
  LessRenderer,
  RenderRequest,
  SassRenderer,
  StylesheetRenderer,
  StylusRenderer,
)

_RENDERER_REGISTRY: Dict[StylesheetFormat, Type[StylesheetRenderer]] = {
  StylesheetFormat.CSS: CssRenderer,
  StylesheetFormat.SASS: SassRenderer,
  StylesheetFormat.LESS: LessRenderer,
  StylesheetFormat.STYLUS: StylusRenderer,
}

_EXTENSION_FORMATS: Dict[str, StylesheetFormat] = {
  ext: fmt for fmt, renderer_cls in _RENDERER_REGISTRY.items() for ext in renderer_cls.extensions
}


def detect_format(path: Path) -> StylesheetFormat:
  """
  Maps a stylesheet path to its dialect.

  Args:
      path: Stylesheet path; only the extension is inspected.

  Returns:
      StylesheetFormat: The dialect, ``CSS`` for unknown extensions.
  """
  return _EXTENSION_FORMATS.get(path.suffix.lower(), StylesheetFormat.CSS)


def select_renderer(path: Path) -> StylesheetRenderer:
  """Instantiates the single renderer responsible for ``path``."""
  return _RENDERER_REGISTRY[detect_format(path)]()


async def render(
  absolute_path: Path,
  raw_fallback_text: Optional[str],
  project_root: Path,
  settings: Optional[PackagerSettings] = None,
) -> str:
  """
  Renders one stylesheet to CSS text with the engine matching its extension.

  Args:
      absolute_path: Stylesheet to render.
      raw_fallback_text: Raw file contents, returned unchanged for plain CSS and fed to Less.
      project_root: Root folder of the package (include path base).
      settings: Engine settings. Defaults apply when omitted.

  Returns:
      str: CSS text.
  """
  request = RenderRequest(
    path=absolute_path,
    project_root=project_root,
    raw_text=raw_fallback_text,
    settings=settings or PackagerSettings(),
  )
  return await select_renderer(absolute_path).render(request)

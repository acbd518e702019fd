"""
Less renderer backed by ``lesscpy``.

The engine is fed the raw text read by this adapter; it never opens the
stylesheet itself. The stream carries the stylesheet path as its ``name`` so
that relative ``@import`` statements resolve against the stylesheet's
directory rather than the process working directory.
"""

import asyncio
import io
from pathlib import Path

from lesscpy.lessc import formatter, parser

from component_packager.resources.template import read_resource
from component_packager.styles.renderers.base import RenderRequest, StylesheetRenderer
from component_packager.utils.console import log_debug


class _FormatOptions:
  """Output options read by ``lesscpy``'s formatter (expanded, space-indented)."""

  minify = False
  xminify = False
  tabs = False
  spaces = True


def _compile_less(path: Path, text: str) -> str:
  stream = io.StringIO(text)
  # lesscpy takes the import base from the stream name.
  stream.name = str(path)
  less_parser = parser.LessParser(fail_with_exc=True)
  less_parser.parse(file=stream)
  return formatter.Formatter(_FormatOptions()).format(less_parser)


class LessRenderer(StylesheetRenderer):
  """Renders ``.less`` stylesheets."""

  extensions = (".less",)

  async def render(self, request: RenderRequest) -> str:
    log_debug(f"rendering less for {request.path}")
    less_data = request.raw_text if request.raw_text is not None else await read_resource(request.path)
    return await asyncio.to_thread(_compile_less, request.path, less_data or "")

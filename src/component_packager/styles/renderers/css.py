"""
Plain CSS passthrough.
"""

from component_packager.resources.template import read_resource
from component_packager.styles.renderers.base import RenderRequest, StylesheetRenderer


class CssRenderer(StylesheetRenderer):
  """Returns the already available raw text unchanged."""

  extensions = (".css",)

  async def render(self, request: RenderRequest) -> str:
    if request.raw_text is not None:
      return request.raw_text
    return await read_resource(request.path)

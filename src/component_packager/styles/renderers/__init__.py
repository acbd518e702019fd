"""
Stylesheet Renderer Adapters.

One adapter per preprocessing engine, all sharing the ``StylesheetRenderer``
contract.
"""

from component_packager.styles.renderers.base import RenderRequest, StylesheetRenderer
from component_packager.styles.renderers.css import CssRenderer
from component_packager.styles.renderers.less import LessRenderer
from component_packager.styles.renderers.sass import SassRenderer
from component_packager.styles.renderers.stylus import StylusRenderer

__all__ = [
  "CssRenderer",
  "LessRenderer",
  "RenderRequest",
  "SassRenderer",
  "StylesheetRenderer",
  "StylusRenderer",
]

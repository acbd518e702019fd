"""
Stylesheet Pipeline.

Render and post-process form one atomic operation: either the final CSS is
produced or the request fails with ``StylesheetRenderError`` naming the
stylesheet. A stylesheet that cannot be read fails with ``ResourceNotFoundError``.
"""

from pathlib import Path
from typing import Optional

from component_packager.config import PackagerSettings
from component_packager.errors import ResourceNotFoundError, StylesheetRenderError
from component_packager.resources.template import read_resource
from component_packager.styles import dispatcher
from component_packager.styles.postprocess import PostProcessor, RenderedStylesheet
from component_packager.utils.console import log_debug


class StylesheetPipeline:
  """
  Renders stylesheets for one project root.
  """

  def __init__(
    self,
    project_root: Path,
    settings: Optional[PackagerSettings] = None,
    post_processor: Optional[PostProcessor] = None,
  ) -> None:
    """
    Args:
        project_root: Root folder of the package being built.
        settings: Engine settings shared by renderers and post-processor.
        post_processor: Override of the post-processing chain.
    """
    self.project_root = Path(project_root).resolve()
    self.settings = settings or PackagerSettings()
    self.post_processor = post_processor or PostProcessor(settings=self.settings)

  async def render(self, path: Path) -> RenderedStylesheet:
    """
    Renders and post-processes a stylesheet.

    Args:
        path: Absolute stylesheet path.

    Returns:
        RenderedStylesheet: Final CSS with warnings.

    Raises:
        ResourceNotFoundError: If the stylesheet cannot be read.
        StylesheetRenderError: If an engine or post-processing step fails.
    """
    raw_text = await read_resource(path)

    try:
      log_debug(f"render stylesheet {path}")
      css = await dispatcher.render(path, raw_text, self.project_root, self.settings)

      log_debug(f"postcss with autoprefixer for {path}")
      return await self.post_processor.process(css, path)
    except ResourceNotFoundError:
      raise
    except Exception as err:
      raise StylesheetRenderError(path, err) from err


async def render_stylesheet(
  path: Path,
  project_root: Path,
  settings: Optional[PackagerSettings] = None,
) -> str:
  """
  Renders one stylesheet to its final CSS text.

  Args:
      path: Absolute stylesheet path.
      project_root: Root folder of the package being built.
      settings: Engine settings.

  Returns:
      str: Final CSS.
  """
  result = await StylesheetPipeline(project_root, settings).render(path)
  return result.css

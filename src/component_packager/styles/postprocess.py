"""
CSS Post-Processing.

Rendered CSS runs through a chain of ``CssTransform`` steps. The default chain
has a single step, vendor prefixing via PostCSS + autoprefixer, run against the
browser targets resolved for the stylesheet. Non-fatal warnings are forwarded
to the logger and returned alongside the CSS; they never change the output.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from component_packager.config import PackagerSettings
from component_packager.styles.browserslist import resolve_browsers
from component_packager.styles.process import run_engine
from component_packager.utils.console import log_debug, log_warning


class RenderedStylesheet(BaseModel):
  """
  Final CSS of one stylesheet plus the warnings emitted while producing it.
  """

  css: str = Field(default="", description="Plain CSS text.")
  warnings: List[str] = Field(default_factory=list, description="Non-fatal transformation warnings.")


class CssTransform(ABC):
  """
  A single post-processing step.
  """

  @abstractmethod
  async def apply(self, css: str, source_path: Path, browsers: List[str]) -> RenderedStylesheet:
    """
    Transforms CSS text.

    Args:
        css: Input CSS.
        source_path: Stylesheet the CSS was rendered from.
        browsers: Resolved browserslist queries.

    Returns:
        RenderedStylesheet: The transformed CSS and any warnings.
    """
    pass


class AutoprefixerTransform(CssTransform):
  """
  Adds vendor prefixes with the PostCSS CLI and the autoprefixer plugin.

  Targets are handed to autoprefixer through the ``BROWSERSLIST`` environment
  variable; anything PostCSS prints on stderr for a successful run is a warning.
  """

  def __init__(self, command: Optional[Sequence[str]] = None) -> None:
    self.command = list(command) if command else list(PackagerSettings().postcss_command)

  async def apply(self, css: str, source_path: Path, browsers: List[str]) -> RenderedStylesheet:
    output = await run_engine(
      self.command,
      stdin_text=css,
      env={"BROWSERSLIST": ", ".join(browsers)},
      cwd=source_path.parent,
    )
    warnings = [line.strip() for line in output.stderr.splitlines() if line.strip()]
    return RenderedStylesheet(css=output.stdout, warnings=warnings)


class PostProcessor:
  """
  Runs rendered CSS through the transformation chain.
  """

  def __init__(
    self,
    transforms: Optional[List[CssTransform]] = None,
    settings: Optional[PackagerSettings] = None,
  ) -> None:
    """
    Args:
        transforms: Explicit chain. Defaults to autoprefixing only.
        settings: Used to build the default chain.
    """
    self.settings = settings or PackagerSettings()
    if transforms is None:
      transforms = [AutoprefixerTransform(self.settings.postcss_command)]
    self.transforms = transforms

  async def process(self, css: str, source_path: Path) -> RenderedStylesheet:
    """
    Applies every transform in order.

    Args:
        css: Rendered CSS.
        source_path: Stylesheet path, used to resolve browser targets.

    Returns:
        RenderedStylesheet: Final CSS and all collected warnings.
    """
    browsers = resolve_browsers(source_path)
    log_debug(f"post-processing {source_path} for browsers: {', '.join(browsers)}")

    result = RenderedStylesheet(css=css)
    for transform in self.transforms:
      step = await transform.apply(result.css, source_path, browsers)
      for message in step.warnings:
        log_warning(message)
      result = RenderedStylesheet(css=step.css, warnings=[*result.warnings, *step.warnings])

    return result


async def post_process(css: str, source_path: Path, settings: Optional[PackagerSettings] = None) -> str:
  """
  Convenience wrapper returning only the final CSS of the default chain.
  """
  result = await PostProcessor(settings=settings).process(css, source_path)
  return result.css

"""
Interface definition for Stylesheet Renderers.

Every preprocessing engine is wrapped behind the same asynchronous contract:
a ``RenderRequest`` goes in, plain CSS text comes out.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from component_packager.config import PackagerSettings


@dataclass(frozen=True)
class RenderRequest:
  """
  A single stylesheet render job. Built per stylesheet and never persisted.

  Attributes:
      path: Absolute path of the stylesheet.
      project_root: Root folder of the package being built.
      raw_text: Contents already read by the caller (used by passthrough and text-fed engines).
      settings: Engine configuration (dependency dir, executables).
  """

  path: Path
  project_root: Path
  raw_text: Optional[str] = None
  settings: PackagerSettings = field(default_factory=PackagerSettings)

  @property
  def extension(self) -> str:
    return self.path.suffix.lower()

  @property
  def dependency_dir(self) -> Path:
    return self.project_root / self.settings.dependency_dir


class StylesheetRenderer(ABC):
  """
  Abstract contract for a stylesheet preprocessing engine adapter.
  """

  #: File extensions handled by this renderer (lowercase, with dot).
  extensions: tuple = ()

  @abstractmethod
  async def render(self, request: RenderRequest) -> str:
    """
    Renders the requested stylesheet to CSS.

    Args:
        request: The render job.

    Returns:
        The rendered CSS text.
    """
    pass

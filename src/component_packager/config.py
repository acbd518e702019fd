"""
Runtime Settings Store.

Settings come from the ``[tool.component_packager]`` table of the nearest
``pyproject.toml`` and can be overridden by keyword arguments.

Example::

    [tool.component_packager]
    dependency_dir = "node_modules"
    component_modules = ["uikit.core"]
    postcss_command = ["npx", "postcss", "--use", "autoprefixer", "--no-map"]
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEFAULT_POSTCSS_COMMAND = ["postcss", "--use", "autoprefixer", "--no-map"]
DEFAULT_STYLUS_COMMAND = ["stylus"]


class PackagerSettings(BaseModel):
  """
  Global configuration container for the inlining and compilation stages.
  """

  dependency_dir: str = Field(
    "node_modules",
    description="Directory (relative to the project root) holding third-party stylesheet packages.",
  )
  component_modules: List[str] = Field(
    default_factory=list,
    description="Modules exporting the `Component` marker. Empty means any module.",
  )
  stylus_command: List[str] = Field(
    default_factory=lambda: list(DEFAULT_STYLUS_COMMAND), description="Executable used to render Stylus."
  )
  postcss_command: List[str] = Field(
    default_factory=lambda: list(DEFAULT_POSTCSS_COMMAND),
    description="PostCSS invocation (with autoprefixer) reading CSS from stdin.",
  )
  fail_on_diagnostics: bool = Field(True, description="If True, error diagnostics fail the build.")

  @field_validator("stylus_command", "postcss_command")
  @classmethod
  def validate_command(cls, v: List[str]) -> List[str]:
    """
    Ensures engine commands name an executable.

    Raises:
        ValueError: If the command list is empty.
    """
    if not v:
      raise ValueError("Engine command must contain at least the executable name")
    return v

  @classmethod
  def load(cls, search_path: Optional[Path] = None, **overrides: Any) -> "PackagerSettings":
    """
    Loads settings from pyproject.toml and applies explicit overrides.

    Args:
        search_path (Optional[Path]): Directory to start searching for TOML config.
        **overrides: Field values taking precedence over the TOML table. ``None`` values are ignored.

    Returns:
        PackagerSettings: The fully resolved settings.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())
    explicit = {k: v for k, v in overrides.items() if v is not None}
    return cls.model_validate({**toml_config, **explicit})


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches parents for 'pyproject.toml' and extracts the packager table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
      return data.get("tool", {}).get("component_packager", {}), parent

  return {}, None

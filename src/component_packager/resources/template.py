"""
Template Resolver.

Resolves a template reference against the directory of the declaring source
file and reads it as text. Reads run in a worker thread so the build loop
stays cooperative.
"""

import asyncio
from pathlib import Path
from typing import Union

from component_packager.errors import ResourceNotFoundError
from component_packager.utils.console import log_debug

PathLike = Union[str, Path]


def resolve_resource_path(declaring_file: PathLike, relative_url: str) -> Path:
  """
  Resolves a relative resource URL against the declaring file's directory.

  Example:
      ``("/my/foo_component.py", "./foo.html")`` -> ``/my/foo.html``

  Args:
      declaring_file: Path of the Python source declaring the component.
      relative_url: The reference as written in the annotation.

  Returns:
      Path: Absolute, normalised path of the resource.
  """
  base_dir = Path(declaring_file).resolve().parent
  return (base_dir / relative_url).resolve()


async def read_resource(path: Path) -> str:
  """
  Reads a resource file as UTF-8 text.

  Raises:
      ResourceNotFoundError: If the file is missing or unreadable. The original
          ``OSError`` subclass is kept on ``error.cause``.
  """
  try:
    data = await asyncio.to_thread(path.read_bytes)
    return data.decode("utf-8")
  except (OSError, UnicodeDecodeError) as err:
    raise ResourceNotFoundError(path, err) from err


async def resolve_template(declaring_file: PathLike, template_url: str) -> str:
  """
  Resolves and reads a component template.

  Args:
      declaring_file: Path of the Python source, e.g. ``/my/foo_component.py``.
      template_url: Relative path of the ``templateUrl`` property, e.g. ``./foo.html``.

  Returns:
      str: Exact text content of the template file.

  Raises:
      ResourceNotFoundError: If the template cannot be read.
  """
  path = resolve_resource_path(declaring_file, template_url)
  log_debug(f"read template {path}")
  return await read_resource(path)

"""
Stylus renderer.

Runs the ``stylus`` executable with include paths for the project root, the
current directory and the dependency directory, and with URL resolution
turned on (same as ``--resolve-url``) so relative asset references are
rewritten against the rendered file.
"""

from typing import List

from component_packager.styles.process import run_engine
from component_packager.styles.renderers.base import RenderRequest, StylesheetRenderer
from component_packager.utils.console import log_debug


def build_stylus_command(request: RenderRequest) -> List[str]:
  """
  Assembles the Stylus CLI invocation for a request.

  Args:
      request: The render job. ``settings.stylus_command`` provides the executable.

  Returns:
      List[str]: Full argument vector.
  """
  return [
    *request.settings.stylus_command,
    "--print",
    "--resolve-url",
    "--include",
    str(request.project_root),
    "--include",
    ".",
    "--include",
    str(request.dependency_dir),
    str(request.path),
  ]


class StylusRenderer(StylesheetRenderer):
  """Renders ``.styl`` / ``.stylus`` stylesheets."""

  extensions = (".styl", ".stylus")

  async def render(self, request: RenderRequest) -> str:
    log_debug(f"rendering styl for {request.path}")
    output = await run_engine(build_stylus_command(request))
    return output.stdout

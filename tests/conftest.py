"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A project tree builder writing sources, templates and stylesheets into ``tmp_path``.
- A passthrough PostCSS command so post-processing runs without Node tooling.
"""

import sys
import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest

# Add src to path so we can import 'component_packager' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from component_packager.config import PackagerSettings  # noqa: E402

#: Stands in for ``postcss``: echoes stdin to stdout.
PASSTHROUGH_COMMAND = [sys.executable, "-c", "import sys; sys.stdout.write(sys.stdin.read())"]


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
  """
  Returns a helper writing ``{relative_path: content}`` under ``tmp_path``.

  Python sources are dedented so tests can use indented triple-quoted strings.
  """

  def _make(files: Dict[str, str]) -> Path:
    for rel, content in files.items():
      target = tmp_path / rel
      target.parent.mkdir(parents=True, exist_ok=True)
      if rel.endswith(".py"):
        content = textwrap.dedent(content).lstrip("\n")
      target.write_text(content, encoding="utf-8")
    return tmp_path

  return _make


@pytest.fixture
def passthrough_settings() -> PackagerSettings:
  """Settings whose PostCSS step returns the CSS unchanged."""
  return PackagerSettings(postcss_command=list(PASSTHROUGH_COMMAND))

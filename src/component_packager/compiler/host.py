"""
Compiler Host.

Serves compilation units to the compiler. Rewritten units are held in an
immutable override table keyed by canonical path; every other path falls
through to a normal read from disk. This substitution lets the compiler run
unmodified on inlined sources.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from component_packager.core.unit import CompilationUnit


def canonical_path(path: Path) -> Path:
  return Path(path).resolve()


class CompilerHost:
  """
  Read path for source files with a rewritten-unit override table.
  """

  def __init__(
    self,
    overrides: Iterable[CompilationUnit] = (),
    fallback: Optional[Callable[[Path], CompilationUnit]] = None,
  ) -> None:
    """
    Args:
        overrides: Units served in place of their on-disk originals.
        fallback: Loader for paths without an override. Defaults to reading from disk.
    """
    self._overrides: Mapping[Path, CompilationUnit] = MappingProxyType(
      {canonical_path(unit.path): unit for unit in overrides}
    )
    self._fallback = fallback or CompilationUnit.read

  @property
  def overrides(self) -> Mapping[Path, CompilationUnit]:
    return self._overrides

  def is_overridden(self, path: Path) -> bool:
    return canonical_path(path) in self._overrides

  def get_source_file(self, path: Path) -> CompilationUnit:
    """
    Returns the unit for ``path``: the rewritten one if present, else the file on disk.
    """
    key = canonical_path(path)
    unit = self._overrides.get(key)
    if unit is not None:
      return unit
    return self._fallback(key)

"""
Compilation Units.

A ``CompilationUnit`` pairs a source path with its parsed LibCST module. LibCST
trees are immutable, so rewrites always produce a new unit.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Union

import libcst as cst


@dataclass(frozen=True)
class CompilationUnit:
  """
  One parsed Python source file.

  Attributes:
      path: Absolute, canonical path of the source file.
      module: The parsed concrete syntax tree.
  """

  path: Path
  module: cst.Module

  @property
  def code(self) -> str:
    return self.module.code

  @property
  def encoded(self) -> bytes:
    """Source bytes in the encoding the file declared (PEP 263 cookie, default UTF-8)."""
    return self.module.bytes

  def with_module(self, module: cst.Module) -> "CompilationUnit":
    """Returns a copy of this unit holding ``module``."""
    return replace(self, module=module)

  @classmethod
  def parse(cls, path: Path, code: Union[str, bytes]) -> "CompilationUnit":
    """
    Parses source code into a unit.

    Bytes are decoded the way the interpreter would, honouring a coding cookie.

    Raises:
        libcst.ParserSyntaxError: If the input code is invalid Python.
        UnicodeDecodeError: If bytes do not match the declared encoding.
    """
    return cls(path=Path(path).resolve(), module=cst.parse_module(code))

  @classmethod
  def read(cls, path: Path) -> "CompilationUnit":
    """Reads and parses a source file from disk."""
    return cls.parse(path, Path(path).read_bytes())

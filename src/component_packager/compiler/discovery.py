"""
Source Discovery.

Finds the compilation units transitively required by the entry file. Imports
are followed when they resolve to a module inside the package's base path:

- relative imports (``from .card import CardComponent``), resolved against the importing file;
- absolute imports (``import widgets.card``), resolved against ``base_url``.

Anything else is a third-party or standard library import and is left to the
runtime. Relative imports that resolve nowhere are reported back so the
compiler can surface them as diagnostics.
"""

from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import libcst as cst

from component_packager.compiler.diagnostics import Diagnostic
from component_packager.core.inliner.symbols import dotted_name
from component_packager.core.unit import CompilationUnit
from component_packager.enums import DiagnosticCategory
from component_packager.errors import CompilationError
from component_packager.utils.console import log_debug


@dataclass(frozen=True)
class ImportRequest:
  """
  One module referenced by an import statement.

  Attributes:
      module: Dotted module path without leading dots (may be empty for ``from . import x``).
      level: Number of leading dots (0 for absolute imports).
      names: Imported names, each possibly a submodule.
  """

  module: str
  level: int = 0
  names: Tuple[str, ...] = ()


class ImportScanner(cst.CSTVisitor):
  """
  Collects every import statement of a module.
  """

  def __init__(self) -> None:
    self.requests: List[ImportRequest] = []

  def visit_Import(self, node: cst.Import) -> Optional[bool]:
    for alias in node.names:
      name = dotted_name(alias.name)
      if name:
        self.requests.append(ImportRequest(module=name))
    return False

  def visit_ImportFrom(self, node: cst.ImportFrom) -> Optional[bool]:
    module = dotted_name(node.module) if node.module else ""
    names: Tuple[str, ...] = ()
    if not isinstance(node.names, cst.ImportStar):
      names = tuple(n for n in (dotted_name(a.name) for a in node.names) if n)
    self.requests.append(ImportRequest(module=module or "", level=len(node.relative), names=names))
    return False


def _module_file(directory: Path, dotted: str) -> Optional[Path]:
  """Maps ``a.b`` under ``directory`` to ``a/b.py`` or ``a/b/__init__.py``."""
  target = directory.joinpath(*dotted.split(".")) if dotted else directory
  if dotted and target.with_suffix(".py").is_file():
    return target.with_suffix(".py")
  if (target / "__init__.py").is_file():
    return target / "__init__.py"
  return None


def _parent_packages(directory: Path, dotted: str) -> List[Path]:
  """``__init__.py`` files of the packages enclosing ``a.b.c`` under ``directory``."""
  found = []
  parts = dotted.split(".")[:-1] if dotted else []
  current = directory
  for part in parts:
    current = current / part
    init = current / "__init__.py"
    if init.is_file():
      found.append(init)
  return found


def resolve_import(request: ImportRequest, importer: Path, base_url: Path) -> Tuple[List[Path], bool]:
  """
  Resolves an import to local source files.

  Args:
      request: The import to resolve.
      importer: File containing the import.
      base_url: Root for absolute imports.

  Returns:
      Tuple[List[Path], bool]: Local files required by the import, and whether the
      import is relative but could not be resolved.
  """
  if request.level:
    directory = importer.parent
    for _ in range(request.level - 1):
      directory = directory.parent
  else:
    directory = base_url

  files: List[Path] = []
  main = _module_file(directory, request.module)

  if main is not None:
    files.extend(_parent_packages(directory, request.module))
    files.append(main)
    if main.name == "__init__.py":
      package_dir = main.parent
      for name in request.names:
        sub = _module_file(package_dir, name)
        if sub is not None:
          files.append(sub)
  elif request.level and not request.module:
    # `from . import x` in a directory without __init__.py
    for name in request.names:
      sub = _module_file(directory, name)
      if sub is not None:
        files.append(sub)

  unresolved = bool(request.level) and not files
  return files, unresolved


@dataclass
class DiscoveryResult:
  """
  Units reachable from the entry files, in discovery order.
  """

  units: List[CompilationUnit] = field(default_factory=list)
  diagnostics: List[Diagnostic] = field(default_factory=list)


def discover_sources(
  root_names: List[Path],
  base_url: Path,
  reader: Optional[Callable[[Path], CompilationUnit]] = None,
) -> DiscoveryResult:
  """
  Collects every local unit transitively imported by the root files.

  Args:
      root_names: Entry files.
      base_url: Root for absolute imports (usually the package base path).
      reader: Loads a unit from a path. Defaults to reading from disk.

  Returns:
      DiscoveryResult: Units (entry files first) and warnings for unresolved relative imports.

  Raises:
      CompilationError: If a file cannot be parsed.
  """
  read = reader or CompilationUnit.read
  base_url = Path(base_url).resolve()
  result = DiscoveryResult()
  seen: Dict[Path, CompilationUnit] = {}
  queue = deque(Path(p).resolve() for p in root_names)

  while queue:
    path = queue.popleft()
    if path in seen:
      continue

    try:
      unit = read(path)
    except cst.ParserSyntaxError as err:
      raise CompilationError(
        [Diagnostic(category=DiagnosticCategory.ERROR, message=err.message, file=path, line=err.raw_line)]
      ) from err
    except OSError as err:
      raise CompilationError(
        [Diagnostic(category=DiagnosticCategory.ERROR, message=f"cannot read source: {err}", file=path)]
      ) from err
    except (SyntaxError, ValueError) as err:
      # Undecodable bytes or an unknown coding cookie.
      raise CompilationError(
        [Diagnostic(category=DiagnosticCategory.ERROR, message=f"cannot decode source: {err}", file=path)]
      ) from err

    seen[path] = unit
    result.units.append(unit)

    scanner = ImportScanner()
    unit.module.visit(scanner)
    for request in scanner.requests:
      files, unresolved = resolve_import(request, path, base_url)
      if unresolved:
        name = "." * request.level + request.module
        result.diagnostics.append(
          Diagnostic(
            category=DiagnosticCategory.WARNING,
            message=f"cannot resolve relative import '{name}'",
            file=path,
          )
        )
      for found in files:
        resolved = found.resolve()
        if resolved not in seen:
          queue.append(resolved)

  log_debug(f"discovered {len(result.units)} source files")
  return result

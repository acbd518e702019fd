"""
Compiler Program.

A ``Program`` is the set of units reachable from the configured root files,
as served by a ``CompilerHost``. Compiling a program:

1.  Byte-compiles every unit, turning syntax errors into error diagnostics.
2.  Writes the (rewritten) sources into a staging directory, mirroring their
    layout relative to the base path.
3.  Writes the flat-module file, which re-exports the entry module's public
    names and records the flat module identity.
4.  Publishes the staging directory as ``out_dir`` only if no error was reported
    (or if the caller asked not to fail on diagnostics).
"""

import py_compile
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from component_packager.compiler.configuration import CompilerConfiguration
from component_packager.compiler.diagnostics import Diagnostic, errors_of
from component_packager.compiler.discovery import discover_sources
from component_packager.compiler.host import CompilerHost
from component_packager.core.unit import CompilationUnit
from component_packager.enums import DiagnosticCategory
from component_packager.errors import CompilationError, PackagerError
from component_packager.utils.console import log_debug


@dataclass
class EmitResult:
  """
  Outcome of a compilation.

  Attributes:
      diagnostics: Every message reported while compiling.
      emitted_files: Published files (empty if nothing was published).
      flat_module: Path of the flat-module artifact, once published.
  """

  diagnostics: List[Diagnostic] = field(default_factory=list)
  emitted_files: List[Path] = field(default_factory=list)
  flat_module: Optional[Path] = None

  @property
  def has_errors(self) -> bool:
    return bool(errors_of(self.diagnostics))


def module_name_for(path: Path, base_path: Path) -> str:
  """
  Dotted module name of a source file relative to the base path.

  Example:
      ``<base>/widgets/card.py`` -> ``widgets.card``; ``<base>/widgets/__init__.py`` -> ``widgets``.
  """
  parts = list(path.relative_to(base_path).with_suffix("").parts)
  if parts and parts[-1] == "__init__":
    parts.pop()
  return ".".join(parts)


def render_flat_module(entry_module: str, flat_module_id: str) -> str:
  """
  Source of the flat-module artifact.
  """
  return (
    f'"""Flat module index for {flat_module_id}."""\n'
    "\n"
    f"from {entry_module} import *  # noqa: F401,F403\n"
    "\n"
    f"__flat_module_id__ = {flat_module_id!r}\n"
  )


class Program:
  """
  The compilation units of one build.
  """

  def __init__(self, config: CompilerConfiguration, host: CompilerHost) -> None:
    self.config = config
    self.host = host
    self._units: Optional[List[CompilationUnit]] = None
    self._discovery_diagnostics: List[Diagnostic] = []

  @property
  def base_path(self) -> Path:
    return (self.config.options.base_path or Path.cwd()).resolve()

  def get_source_files(self) -> List[CompilationUnit]:
    """
    Units reachable from the root files, read through the host.
    """
    if self._units is None:
      base_url = self.config.options.base_url or self.base_path
      discovery = discover_sources(self.config.root_names, base_url, reader=self.host.get_source_file)
      self._units = discovery.units
      self._discovery_diagnostics = discovery.diagnostics
    return self._units

  def _check(self, unit: CompilationUnit) -> List[Diagnostic]:
    try:
      compile(unit.code, str(unit.path), "exec", dont_inherit=True, optimize=self.config.options.optimize)
    except SyntaxError as err:
      return [Diagnostic(category=DiagnosticCategory.ERROR, message=err.msg, file=unit.path, line=err.lineno)]
    except ValueError as err:
      return [Diagnostic(category=DiagnosticCategory.ERROR, message=str(err), file=unit.path)]

    try:
      unit.encoded
    except UnicodeEncodeError as err:
      message = f"inlined content cannot be encoded as {unit.module.encoding}: {err.reason}"
      return [Diagnostic(category=DiagnosticCategory.ERROR, message=message, file=unit.path)]
    return []

  def _write(self, staging: Path, relative: Path, data: bytes) -> None:
    dest = staging / relative
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(data)
    if self.config.options.emit_bytecode:
      py_compile.compile(str(dest), doraise=True, optimize=self.config.options.optimize)

  def _publish(self, staging: Path, out_dir: Path) -> None:
    if out_dir == self.base_path or out_dir in self.base_path.parents:
      raise PackagerError(f"Refusing to replace {out_dir}: it contains the package sources")
    if out_dir.exists():
      shutil.rmtree(out_dir)
    out_dir.parent.mkdir(parents=True, exist_ok=True)
    staging.rename(out_dir)

  def emit(self, fail_on_diagnostics: bool = True) -> EmitResult:
    """
    Compiles and emits the program.

    Args:
        fail_on_diagnostics: If True, error diagnostics raise ``CompilationError``
            and nothing is published.

    Returns:
        EmitResult: Diagnostics and published files.

    Raises:
        CompilationError: On error diagnostics when ``fail_on_diagnostics`` is set.
    """
    opts = self.config.options
    units = self.get_source_files()
    result = EmitResult(diagnostics=list(self._discovery_diagnostics))

    for unit in units:
      result.diagnostics.extend(self._check(unit))

    entry = Path(self.config.root_names[0]).resolve() if self.config.root_names else None
    if entry is None:
      result.diagnostics.append(Diagnostic(category=DiagnosticCategory.ERROR, message="no root files configured"))

    if result.has_errors and fail_on_diagnostics:
      raise CompilationError(errors_of(result.diagnostics))

    out_dir = Path(opts.out_dir).resolve()
    gen_dir = Path(opts.gen_dir).resolve()
    gen_dir.parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=f".{gen_dir.name}-", dir=gen_dir.parent))

    try:
      relatives = []
      for unit in units:
        try:
          relative = unit.path.relative_to(self.base_path)
        except ValueError:
          result.diagnostics.append(
            Diagnostic(category=DiagnosticCategory.WARNING, message="outside the base path, not emitted", file=unit.path)
          )
          continue
        self._write(staging, relative, unit.encoded)
        relatives.append(relative)

      if entry is not None:
        flat_name = opts.flat_module_out_file or "index.py"
        flat_source = render_flat_module(module_name_for(entry, self.base_path), opts.flat_module_id or flat_name)
        self._write(staging, Path(flat_name), flat_source.encode("utf-8"))
        relatives.append(Path(flat_name))
        result.flat_module = out_dir / flat_name

      self._publish(staging, out_dir)
    except BaseException:
      shutil.rmtree(staging, ignore_errors=True)
      raise

    result.emitted_files = [out_dir / rel for rel in relatives]
    log_debug(f"emitted {len(result.emitted_files)} files to {out_dir}")
    return result

"""
Compiler Orchestrator.

Drives one package build through a linear sequence of stages:

1.  **CONFIG_PREPARED**: default compiler configuration merged with the package options.
2.  **SOURCES_DISCOVERED**: units transitively required by the entry file.
3.  **SOURCES_REWRITTEN**: component annotations inlined in every unit.
4.  **PROGRAM_CONSTRUCTED**: a compiler host serving rewritten units in place of the originals.
5.  **COMPILATION_PERFORMED**: units compiled and emitted, flat module written.
6.  **DONE**: the flat-module artifact path is returned.

A failure at any stage aborts the build; the error is tagged with the stage
that was running and re-raised. Nothing is published before compilation succeeds.
"""

import asyncio
from pathlib import Path
from typing import Optional

from component_packager.compiler.configuration import (
  CompilerConfiguration,
  PackageDescriptor,
  prepare_compiler_config,
)
from component_packager.compiler.diagnostics import Diagnostic
from component_packager.compiler.discovery import discover_sources
from component_packager.compiler.host import CompilerHost
from component_packager.compiler.program import Program
from component_packager.config import PackagerSettings
from component_packager.core.inliner import AnnotationRewriter
from component_packager.enums import BuildStage, DiagnosticCategory
from component_packager.errors import PackagerError
from component_packager.utils.console import log_debug, log_error, log_info, log_success, log_warning


def _report(diagnostic: Diagnostic) -> None:
  if diagnostic.category is DiagnosticCategory.ERROR:
    log_error(diagnostic.format())
  elif diagnostic.category is DiagnosticCategory.WARNING:
    log_warning(diagnostic.format())
  else:
    log_info(diagnostic.format())


class PackageBuilder:
  """
  Builds one package.

  Attributes:
      stage (BuildStage | None): The last stage completed.
      config (CompilerConfiguration | None): Set once the configuration is prepared.
  """

  def __init__(
    self,
    descriptor: PackageDescriptor,
    base_path: Path,
    settings: Optional[PackagerSettings] = None,
    rewriter: Optional[AnnotationRewriter] = None,
    defaults_path: Optional[Path] = None,
  ) -> None:
    self.descriptor = descriptor
    self.base_path = Path(base_path).resolve()
    self.settings = settings or PackagerSettings.load(search_path=self.base_path)
    self.rewriter = rewriter or AnnotationRewriter(self.base_path, self.settings)
    self.defaults_path = defaults_path
    self.stage: Optional[BuildStage] = None
    self.config: Optional[CompilerConfiguration] = None

  def _advance(self, stage: BuildStage) -> None:
    self.stage = stage
    log_debug(f"stage {stage.value}")

  def _next_stage(self) -> BuildStage:
    order = list(BuildStage)
    if self.stage is None:
      return order[0]
    return order[order.index(self.stage) + 1]

  async def run(self) -> Path:
    """
    Executes every stage.

    Returns:
        Path: The flat-module artifact (``base_path / out_dir / flat_module_out_file``).

    Raises:
        PackagerError: Any stage failure, with ``error.stage`` set to the failing stage.
    """
    log_info(f"Building {self.descriptor.full_package_name} from {self.descriptor.entry_file}")
    try:
      config = prepare_compiler_config(self.descriptor, self.base_path, self.defaults_path)
      self.config = config
      self._advance(BuildStage.CONFIG_PREPARED)

      discovery = discover_sources(config.root_names, config.options.base_url or self.base_path)
      self._advance(BuildStage.SOURCES_DISCOVERED)

      rewritten = await self.rewriter.rewrite_units(discovery.units)
      self._advance(BuildStage.SOURCES_REWRITTEN)

      host = CompilerHost(overrides=rewritten)
      program = Program(config, host)
      self._advance(BuildStage.PROGRAM_CONSTRUCTED)

      result = program.emit(fail_on_diagnostics=self.settings.fail_on_diagnostics)
      for diagnostic in result.diagnostics:
        _report(diagnostic)
      self._advance(BuildStage.COMPILATION_PERFORMED)
    except PackagerError as err:
      err.stage = self._next_stage()
      log_error(str(err))
      raise

    self._advance(BuildStage.DONE)
    output = config.output_path
    log_success(f"Built {self.descriptor.full_package_name}: {output}")
    return output


async def build_package(
  descriptor: PackageDescriptor,
  base_path: Path,
  settings: Optional[PackagerSettings] = None,
) -> Path:
  """
  Inlines component metadata and compiles a package.

  Args:
      descriptor: Entry file, flat-module identity and file name.
      base_path: Root folder of the package.
      settings: Packager settings. Loaded from ``pyproject.toml`` when omitted.

  Returns:
      Path: Location of the flat-module artifact.
  """
  return await PackageBuilder(descriptor, base_path, settings).run()


def build_package_sync(
  descriptor: PackageDescriptor,
  base_path: Path,
  settings: Optional[PackagerSettings] = None,
) -> Path:
  """Blocking wrapper around ``build_package`` for synchronous callers."""
  return asyncio.run(build_package(descriptor, base_path, settings))

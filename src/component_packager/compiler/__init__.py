"""
Compiler Package.

Configuration, source discovery, the compiler host, and the build orchestrator.
"""

from component_packager.compiler.configuration import (
  CompilerConfiguration,
  CompilerOptions,
  PackageDescriptor,
  prepare_compiler_config,
)
from component_packager.compiler.host import CompilerHost
from component_packager.compiler.orchestrator import PackageBuilder, build_package, build_package_sync
from component_packager.compiler.program import EmitResult, Program

__all__ = [
  "CompilerConfiguration",
  "CompilerHost",
  "CompilerOptions",
  "EmitResult",
  "PackageBuilder",
  "PackageDescriptor",
  "Program",
  "build_package",
  "build_package_sync",
  "prepare_compiler_config",
]

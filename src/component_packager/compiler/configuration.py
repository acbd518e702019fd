"""
Compiler Configuration.

The compiler configuration is built once per build: the bundled default
document (``conf/compiler_defaults.json``) is read and the package-specific
options are layered on top of it.
"""

import json
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from component_packager.errors import ConfigurationError

_DEFAULTS_PATH = Path(__file__).resolve().parent.parent / "conf" / "compiler_defaults.json"


class PackageDescriptor(BaseModel):
  """
  The package being built, as described by its manifest.
  """

  entry_file: str = Field(..., description="Entry module, relative to the base path (e.g. 'src/public_api.py').")
  full_package_name: str = Field(..., description="Identity of the flat module (e.g. '@acme/widgets').")
  flat_module_file_name: str = Field(..., description="Base name of the flat-module artifact (without extension).")


class CompilerOptions(BaseModel):
  """
  Options consumed by the downstream compiler.
  """

  out_dir: Path = Field(Path(".pkg_build"), description="Output directory (relative paths resolve against base_path).")
  gen_dir: Path = Field(Path(".pkg_build"), description="Intermediate directory.")
  base_path: Optional[Path] = Field(None, description="Root folder of the package.")
  base_url: Optional[Path] = Field(None, description="Base for resolving absolute imports.")
  flat_module_id: Optional[str] = Field(None, description="Identity recorded in the flat module.")
  flat_module_out_file: Optional[str] = Field(None, description="File name of the flat-module artifact.")
  optimize: int = Field(-1, description="Optimisation level passed to ``compile``.")
  emit_bytecode: bool = Field(False, description="If True, also write ``.pyc`` files next to emitted sources.")


class CompilerConfiguration(BaseModel):
  """
  Root files plus compiler options for one build.
  """

  root_names: List[Path] = Field(default_factory=list, description="Entry files of the program.")
  options: CompilerOptions = Field(default_factory=CompilerOptions)

  @property
  def output_path(self) -> Path:
    """
    Location of the flat-module artifact: ``base_path / out_dir / flat_module_out_file``.
    """
    opts = self.options
    return (opts.base_path or Path.cwd()) / opts.out_dir / (opts.flat_module_out_file or "index.py")


def read_configuration(path: Optional[Path] = None) -> CompilerConfiguration:
  """
  Reads a compiler configuration document.

  Args:
      path: JSON document. Defaults to the bundled defaults.

  Returns:
      CompilerConfiguration: The parsed configuration.

  Raises:
      ConfigurationError: If the document cannot be loaded or does not validate.
  """
  source = Path(path or _DEFAULTS_PATH)
  try:
    with open(source, "rt", encoding="utf-8") as f:
      data = json.load(f)
    return CompilerConfiguration.model_validate(data)
  except (OSError, ValueError) as err:
    raise ConfigurationError(source, err) from err


def prepare_compiler_config(
  descriptor: PackageDescriptor,
  base_path: Path,
  defaults_path: Optional[Path] = None,
) -> CompilerConfiguration:
  """
  Merges the default configuration with package-specific options.

  Args:
      descriptor: The package being built.
      base_path: Root folder of the package.
      defaults_path: Alternative default configuration document.

  Returns:
      CompilerConfiguration: The configuration for this build.
  """
  base_path = Path(base_path).resolve()
  config = read_configuration(defaults_path)
  opts = config.options

  return config.model_copy(
    update={
      "root_names": [(base_path / descriptor.entry_file).resolve()],
      "options": opts.model_copy(
        update={
          "flat_module_id": descriptor.full_package_name,
          "flat_module_out_file": f"{descriptor.flat_module_file_name}.py",
          "base_path": base_path,
          "base_url": base_path,
          "out_dir": (base_path / opts.out_dir).resolve(),
          "gen_dir": (base_path / opts.gen_dir).resolve(),
        }
      ),
    }
  )

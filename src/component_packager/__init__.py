"""
component-packager Package.

Inlines the external templates and stylesheets referenced by component
annotations, then compiles the package into a flat module.

Usage
-----

Building a Package
^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import asyncio
    from pathlib import Path
    from component_packager import PackageDescriptor, build_package

    descriptor = PackageDescriptor(
      entry_file="widgets/public_api.py",
      full_package_name="acme-widgets",
      flat_module_file_name="acme_widgets",
    )
    artifact = asyncio.run(build_package(descriptor, Path("libs/widgets")))

Rewriting a Single Source
^^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from pathlib import Path
    from component_packager import inline_source

    code = inline_source(Path("widgets/card.py"))
"""

import asyncio
from pathlib import Path
from typing import Optional

from component_packager.compiler import PackageDescriptor, build_package, build_package_sync
from component_packager.config import PackagerSettings
from component_packager.core.inliner import AnnotationRewriter
from component_packager.core.unit import CompilationUnit
from component_packager.errors import (
  CompilationError,
  ConfigurationError,
  MetadataInlineError,
  PackagerError,
  ResourceNotFoundError,
  StylesheetRenderError,
)

__version__ = "0.1.0"


def inline_source(path: Path, project_root: Optional[Path] = None, settings: Optional[PackagerSettings] = None) -> str:
  """
  Inlines the component metadata of one source file.

  Args:
      path: Python source declaring components.
      project_root: Root for stylesheet include paths. Defaults to the file's directory.
      settings: Packager settings.

  Returns:
      str: The rewritten source code.

  Raises:
      MetadataInlineError: If a template or stylesheet cannot be inlined.
  """
  unit = CompilationUnit.read(Path(path))
  rewriter = AnnotationRewriter(project_root or unit.path.parent, settings)
  return asyncio.run(rewriter.rewrite_unit(unit)).code


__all__ = [
  "AnnotationRewriter",
  "CompilationError",
  "CompilationUnit",
  "ConfigurationError",
  "MetadataInlineError",
  "PackageDescriptor",
  "PackagerError",
  "PackagerSettings",
  "ResourceNotFoundError",
  "StylesheetRenderError",
  "__version__",
  "build_package",
  "build_package_sync",
  "inline_source",
]

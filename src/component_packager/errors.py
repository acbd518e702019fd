"""
Exception Hierarchy.

All failures raised by the packager derive from ``PackagerError``:

- ``ResourceNotFoundError``: A template or stylesheet file is missing or unreadable.
- ``StylesheetRenderError``: A stylesheet engine or the post-processor failed.
- ``MetadataInlineError``: One of the above happened while inlining a component annotation.
- ``ConfigurationError``: The compiler configuration document could not be loaded.
- ``CompilationError``: The downstream compiler reported error diagnostics.

Errors are never retried. Lower-level failures are wrapped with context
(path, property, build stage) and chained via ``raise ... from``.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
  from component_packager.compiler.diagnostics import Diagnostic
  from component_packager.enums import BuildStage


class PackagerError(Exception):
  """
  Base class for every packager failure.

  Attributes:
      message (str): Human readable description.
      details (Dict[str, Any]): Structured context (paths, positions).
      stage (Optional[BuildStage]): Build stage that was active when the error surfaced.
  """

  def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
    super().__init__(message)
    self.message = message
    self.details: Dict[str, Any] = details or {}
    self.stage: Optional["BuildStage"] = None

  def __str__(self) -> str:
    if self.stage is not None:
      return f"[{self.stage.value}] {self.message}"
    return self.message


class ResourceNotFoundError(PackagerError):
  """
  A referenced resource file could not be read.

  The original ``OSError`` is kept as ``cause`` so callers can still tell
  a missing file (``FileNotFoundError``) from a permission problem
  (``PermissionError``).
  """

  def __init__(self, path: Path, cause: Optional[Exception] = None) -> None:
    """
    Args:
        path: Absolute path of the resource.
        cause: The underlying I/O error.
    """
    reason = type(cause).__name__ if cause is not None else "FileNotFoundError"
    super().__init__(f"Cannot read resource {path} ({reason})", details={"path": str(path), "reason": reason})
    self.path = path
    self.cause = cause
    self.reason = reason


class StylesheetRenderError(PackagerError):
  """Rendering or post-processing of a stylesheet failed."""

  def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
    message = f"Cannot inline stylesheet {path}"
    if cause is not None:
      message = f"{message}: {cause}"
    super().__init__(message, details={"path": str(path)})
    self.path = path
    self.cause = cause


class MetadataInlineError(PackagerError):
  """
  Inlining a component annotation property failed.

  Fatal for the compilation unit and therefore for the whole build.
  """

  def __init__(
    self,
    unit_path: Path,
    property_name: str,
    *,
    url: Optional[str] = None,
    line: Optional[int] = None,
    column: Optional[int] = None,
    cause: Optional[BaseException] = None,
    reason: Optional[str] = None,
  ) -> None:
    """
    Args:
        unit_path: Source file declaring the component.
        property_name: Metadata key being inlined (e.g. ``templateUrl``).
        url: The resource reference that failed, if any.
        line: 1-based line of the property in the source file.
        column: 0-based column of the property in the source file.
        cause: The underlying resolution error.
        reason: Explanation when there is no underlying exception.
    """
    location = f"{unit_path}:{line}:{column}" if line is not None else str(unit_path)
    what = f"'{property_name}'" + (f" ({url})" if url else "")
    because = reason or (str(cause) if cause is not None else "unknown failure")
    super().__init__(
      f"{location}: cannot inline {what}: {because}",
      details={
        "unit": str(unit_path),
        "property": property_name,
        "url": url,
        "line": line,
        "column": column,
      },
    )
    self.unit_path = unit_path
    self.property_name = property_name
    self.url = url
    self.line = line
    self.column = column
    self.cause = cause


class CompilationError(PackagerError):
  """The downstream compiler reported one or more error diagnostics."""

  def __init__(self, diagnostics: List["Diagnostic"]) -> None:
    summary = "; ".join(d.format() for d in diagnostics) or "compilation failed"
    super().__init__(f"Compilation failed: {summary}", details={"count": len(diagnostics)})
    self.diagnostics = list(diagnostics)


class ConfigurationError(PackagerError):
  """The compiler configuration document is unreadable or invalid."""

  def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
    message = f"Invalid compiler configuration {path}"
    if cause is not None:
      message = f"{message}: {cause}"
    super().__init__(message, details={"path": str(path)})
    self.path = path
    self.cause = cause

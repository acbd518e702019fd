"""
Compiler diagnostics.
"""

from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from component_packager.enums import DiagnosticCategory


class Diagnostic(BaseModel):
  """
  A single message reported by the compiler.
  """

  category: DiagnosticCategory = Field(DiagnosticCategory.ERROR, description="Severity.")
  message: str = Field(..., description="Human readable text.")
  file: Optional[Path] = Field(None, description="Source file the message refers to.")
  line: Optional[int] = Field(None, description="1-based line number.")

  def format(self) -> str:
    location = ""
    if self.file is not None:
      location = f"{self.file}:{self.line}: " if self.line is not None else f"{self.file}: "
    return f"{location}{self.category.value}: {self.message}"


def errors_of(diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
  """Filters the error diagnostics."""
  return [d for d in diagnostics if d.category is DiagnosticCategory.ERROR]

"""
Enumerations for component-packager.

This module defines the enumerations shared across the build pipeline.
"""

from enum import Enum


class BuildStage(str, Enum):
  """
  Linear states of a package build.

  Each stage is a prerequisite for the next; a failure in any stage aborts the build.
  """

  CONFIG_PREPARED = "config_prepared"
  SOURCES_DISCOVERED = "sources_discovered"
  SOURCES_REWRITTEN = "sources_rewritten"
  PROGRAM_CONSTRUCTED = "program_constructed"
  COMPILATION_PERFORMED = "compilation_performed"
  DONE = "done"


class StylesheetFormat(str, Enum):
  """
  Stylesheet dialects recognised by the renderer dispatcher.
  """

  CSS = "css"
  SASS = "sass"  # .scss and .sass
  LESS = "less"
  STYLUS = "stylus"  # .styl and .stylus


class DiagnosticCategory(str, Enum):
  """Severity of a compiler diagnostic."""

  ERROR = "error"
  WARNING = "warning"
  MESSAGE = "message"

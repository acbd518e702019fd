"""
Tests for the logging helpers and console injection.

Verifies:
1. The proxy forwards to the active Rich console.
2. `set_console` redirects log output.
3. Semantic wrappers add their prefixes and honour the handler level.
"""

import logging

import pytest
from rich.console import Console

from component_packager.utils.console import (
  console,
  log_debug,
  log_error,
  log_info,
  log_success,
  log_warning,
  reset_console,
  set_console,
)


@pytest.fixture(autouse=True)
def cleanup_console():
  """Ensures console is reset to stdout after every test."""
  reset_console()
  yield
  reset_console()


@pytest.fixture
def captured():
  capture_console = Console(record=True, width=200)
  set_console(capture_console)
  return capture_console


def test_proxy_delegates_to_backend():
  assert isinstance(console.backend, Console)
  assert isinstance(console.width, int)


def test_injected_console_receives_logs(captured):
  log_info("Building acme-widgets")
  log_success("Built acme-widgets")
  log_warning("Gradient has outdated direction syntax")
  log_error("Compilation failed")

  output = captured.export_text()

  assert "ℹ️" in output and "Building acme-widgets" in output
  assert "✅" in output and "Built acme-widgets" in output
  assert "⚠️" in output and "outdated direction" in output
  assert "❌" in output and "Compilation failed" in output


def test_debug_hidden_until_level_lowered(captured):
  log_debug("stage config_prepared")
  assert "stage config_prepared" not in captured.export_text()

  console.set_level(logging.DEBUG)
  log_debug("stage sources_discovered")
  assert "stage sources_discovered" in captured.export_text()


def test_reset_creates_fresh_backend(captured):
  reset_console()
  assert console.backend is not captured


def test_logs_propagate_to_standard_logging(caplog):
  with caplog.at_level(logging.DEBUG, logger="component_packager"):
    log_debug("render stylesheet a.scss")
  assert "render stylesheet a.scss" in caplog.text

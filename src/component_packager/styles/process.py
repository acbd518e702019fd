"""
Asynchronous invocation of external stylesheet engines (Stylus, PostCSS).
"""

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True)
class EngineOutput:
  stdout: str
  stderr: str


class EngineProcessError(RuntimeError):
  """An engine executable is missing or exited with a non-zero status."""

  def __init__(self, command: List[str], message: str, returncode: Optional[int] = None) -> None:
    super().__init__(f"{command[0]}: {message}")
    self.command = command
    self.returncode = returncode


async def run_engine(
  command: List[str],
  stdin_text: Optional[str] = None,
  env: Optional[Dict[str, str]] = None,
  cwd: Optional[Path] = None,
) -> EngineOutput:
  """
  Runs an engine executable and collects its decoded output.

  Args:
      command: Executable followed by its arguments.
      stdin_text: Text written to the process' standard input.
      env: Extra environment variables layered over ``os.environ``.
      cwd: Working directory of the process.

  Returns:
      EngineOutput: Captured stdout and stderr.

  Raises:
      EngineProcessError: If the executable is not found or exits with an error.
  """
  try:
    proc = await asyncio.create_subprocess_exec(
      *command,
      stdin=asyncio.subprocess.PIPE if stdin_text is not None else asyncio.subprocess.DEVNULL,
      stdout=asyncio.subprocess.PIPE,
      stderr=asyncio.subprocess.PIPE,
      env={**os.environ, **(env or {})},
      cwd=str(cwd) if cwd else None,
    )
  except FileNotFoundError as err:
    raise EngineProcessError(command, "executable not found") from err

  stdout, stderr = await proc.communicate(stdin_text.encode("utf-8") if stdin_text is not None else None)
  out = EngineOutput(stdout.decode("utf-8"), stderr.decode("utf-8"))

  if proc.returncode != 0:
    detail = out.stderr.strip() or out.stdout.strip() or "no output"
    raise EngineProcessError(command, f"exited with status {proc.returncode}: {detail}", proc.returncode)

  return out

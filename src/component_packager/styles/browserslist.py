"""
Browser Target Resolution.

Determines the browser support matrix used by vendor prefixing, following the
lookup order of the ``browserslist`` ecosystem:

1.  The ``BROWSERSLIST`` environment variable.
2.  The nearest ``.browserslistrc`` / ``browserslist`` file or ``browserslist``
    key in ``package.json``, searching upwards from the stylesheet directory.
3.  The ecosystem defaults.

Config files may be split in ``[env]`` sections; the active environment comes
from ``BROWSERSLIST_ENV`` or ``NODE_ENV`` and defaults to ``production``.
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

DEFAULT_BROWSERS = ["> 0.5%", "last 2 versions", "Firefox ESR", "not dead"]

_CONFIG_FILES = (".browserslistrc", "browserslist")


def _split_queries(text: str) -> List[str]:
  return [q.strip() for q in text.split(",") if q.strip()]


def parse_config(text: str) -> Dict[str, List[str]]:
  """
  Parses a browserslist config file into sections.

  Queries outside any ``[section]`` are stored under ``"defaults"``. A header
  may name several environments (``[production staging]``).

  Args:
      text: File contents.

  Returns:
      Dict[str, List[str]]: Queries per environment.
  """
  sections: Dict[str, List[str]] = {"defaults": []}
  current = ["defaults"]

  for raw_line in text.splitlines():
    line = raw_line.split("#", 1)[0].strip()
    if not line:
      continue
    if line.startswith("[") and line.endswith("]"):
      current = line[1:-1].split()
      for name in current:
        sections.setdefault(name, [])
      continue
    for name in current:
      sections[name].extend(_split_queries(line))

  return sections


def _read_package_json(path: Path) -> Optional[Dict[str, List[str]]]:
  data = json.loads(path.read_text(encoding="utf-8"))
  value = data.get("browserslist") if isinstance(data, dict) else None
  if value is None:
    return None
  if isinstance(value, str):
    return {"defaults": _split_queries(value)}
  if isinstance(value, list):
    return {"defaults": [str(q) for q in value]}
  return {str(k): ([v] if isinstance(v, str) else list(v)) for k, v in value.items()}


def find_config(start_dir: Path) -> Optional[Tuple[Path, Dict[str, List[str]]]]:
  """
  Searches ``start_dir`` and its parents for a browserslist configuration.

  Returns:
      The config location and its parsed sections, or None if nothing was found.
  """
  current = start_dir.resolve()
  for parent in [current, *current.parents]:
    for name in _CONFIG_FILES:
      candidate = parent / name
      if candidate.is_file():
        return candidate, parse_config(candidate.read_text(encoding="utf-8"))

    package_json = parent / "package.json"
    if package_json.is_file():
      sections = _read_package_json(package_json)
      if sections is not None:
        return package_json, sections

  return None


def resolve_browsers(source_path: Path, environ: Optional[Mapping[str, str]] = None) -> List[str]:
  """
  Resolves the effective browser queries for a stylesheet.

  Args:
      source_path: The stylesheet; the search starts at its directory.
      environ: Environment mapping (defaults to ``os.environ``).

  Returns:
      List[str]: Browserslist queries.
  """
  env = os.environ if environ is None else environ

  if env.get("BROWSERSLIST"):
    return _split_queries(env["BROWSERSLIST"])

  found = find_config(source_path.parent)
  if found is None:
    return list(DEFAULT_BROWSERS)

  _, sections = found
  env_name = env.get("BROWSERSLIST_ENV") or env.get("NODE_ENV") or "production"
  queries = sections.get(env_name) or sections.get("defaults")
  return list(queries) if queries else list(DEFAULT_BROWSERS)

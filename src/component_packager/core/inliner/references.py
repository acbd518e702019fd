"""
Metadata property records.

A ``ResourceReference`` captures one ``templateUrl`` / ``styleUrls`` property
of a component annotation, together with the CST node to replace and its
source position.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

import libcst as cst


class PropertyKind(str, Enum):
  TEMPLATE_URL = "templateUrl"
  STYLE_URLS = "styleUrls"


#: Reference keys (camelCase and snake_case spellings) mapped to their kind.
REFERENCE_KEYS: Dict[str, PropertyKind] = {
  "templateUrl": PropertyKind.TEMPLATE_URL,
  "template_url": PropertyKind.TEMPLATE_URL,
  "styleUrls": PropertyKind.STYLE_URLS,
  "style_urls": PropertyKind.STYLE_URLS,
}

#: Name of the inline property replacing each reference kind.
INLINE_KEYS: Dict[PropertyKind, str] = {
  PropertyKind.TEMPLATE_URL: "template",
  PropertyKind.STYLE_URLS: "styles",
}

PropertyNode = Union[cst.Arg, cst.DictElement]


@dataclass(frozen=True)
class ResourceReference:
  """
  One file-reference property inside a component annotation.

  Attributes:
      kind: Template or stylesheet reference.
      key: The key as written in source (e.g. ``styleUrls``).
      node: The keyword argument or dict element holding the property.
      urls: Referenced paths in declaration order (a single one for templates).
      line: 1-based source line of the property.
      column: 0-based source column of the property.
  """

  kind: PropertyKind
  key: str
  node: PropertyNode
  urls: Tuple[str, ...]
  line: Optional[int] = None
  column: Optional[int] = None

  @property
  def inline_key(self) -> str:
    return INLINE_KEYS[self.kind]


def string_value(node: cst.BaseExpression) -> Optional[str]:
  """
  Evaluates a plain string literal.

  Args:
      node: Candidate literal.

  Returns:
      Optional[str]: The literal's value, or None for anything that is not a
      plain (non-formatted, non-bytes) string literal.
  """
  if isinstance(node, (cst.SimpleString, cst.ConcatenatedString)):
    value = node.evaluated_value
    if isinstance(value, str):
      return value
  return None


def make_string_literal(text: str) -> cst.SimpleString:
  """
  Builds an escaped string literal whose evaluated value equals ``text`` exactly.
  """
  return cst.SimpleString(repr(text))

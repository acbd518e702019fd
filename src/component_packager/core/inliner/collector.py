"""
Component Annotation Collector.

First pass of the inliner: a read-only visitor that finds component
annotations on class definitions and records every file-reference property
(with its position) without touching the tree.

Both metadata forms are supported::

    @Component(templateUrl="./a.html", styleUrls=["./a.scss"])
    @Component({"templateUrl": "./a.html", "styleUrls": ["./a.scss"]})
"""

from pathlib import Path
from typing import Iterator, List, Optional, Set, Tuple

import libcst as cst
from libcst.metadata import PositionProvider

from component_packager.core.inliner.references import (
  INLINE_KEYS,
  REFERENCE_KEYS,
  PropertyKind,
  PropertyNode,
  ResourceReference,
  string_value,
)
from component_packager.core.inliner.symbols import ComponentMatcher
from component_packager.errors import MetadataInlineError


def iter_properties(call: cst.Call) -> Iterator[Tuple[str, PropertyNode, cst.BaseExpression]]:
  """
  Yields ``(key, node, value)`` for every metadata property of an annotation call.

  Keyword arguments are properties; so are string-keyed entries of a dict
  literal passed positionally.
  """
  for arg in call.args:
    if arg.keyword is not None:
      yield arg.keyword.value, arg, arg.value
    elif isinstance(arg.value, cst.Dict) and not arg.star:
      for element in arg.value.elements:
        if not isinstance(element, cst.DictElement):
          continue
        key = string_value(element.key)
        if key is not None:
          yield key, element, element.value


class ComponentCollector(cst.CSTVisitor):
  """
  Records the resource references of every component annotation in a module.

  Attributes:
      references (List[ResourceReference]): Found references, in source order.
      annotation_count (int): Number of component annotations seen.
  """

  METADATA_DEPENDENCIES = (PositionProvider,)

  def __init__(self, unit_path: Path, matcher: ComponentMatcher) -> None:
    super().__init__()
    self.unit_path = unit_path
    self.matcher = matcher
    self.references: List[ResourceReference] = []
    self.annotation_count = 0

  def _position(self, node: cst.CSTNode) -> Tuple[Optional[int], Optional[int]]:
    pos = self.get_metadata(PositionProvider, node, None)
    if pos is None:
      return None, None
    return pos.start.line, pos.start.column

  def _fail(self, key: str, node: cst.CSTNode, reason: str) -> MetadataInlineError:
    line, column = self._position(node)
    return MetadataInlineError(self.unit_path, key, line=line, column=column, reason=reason)

  def _extract_urls(self, kind: PropertyKind, key: str, node: PropertyNode, value: cst.BaseExpression) -> Tuple[str, ...]:
    if kind is PropertyKind.TEMPLATE_URL:
      url = string_value(value)
      if url is None:
        raise self._fail(key, node, "value must be a string literal")
      return (url,)

    if not isinstance(value, (cst.List, cst.Tuple)):
      raise self._fail(key, node, "value must be a list or tuple of string literals")

    urls = []
    for element in value.elements:
      url = string_value(element.value) if isinstance(element, cst.Element) else None
      if url is None:
        raise self._fail(key, node, "every entry must be a string literal")
      urls.append(url)
    return tuple(urls)

  def _collect(self, call: cst.Call) -> None:
    properties = list(iter_properties(call))
    present: Set[str] = {key for key, _, _ in properties}
    seen: Set[PropertyKind] = set()

    for key, node, value in properties:
      kind = REFERENCE_KEYS.get(key)
      if kind is None:
        continue

      if INLINE_KEYS[kind] in present:
        raise self._fail(key, node, f"'{INLINE_KEYS[kind]}' is declared as well")
      if kind in seen:
        raise self._fail(key, node, f"'{kind.value}' is declared more than once")
      seen.add(kind)

      line, column = self._position(node)
      self.references.append(
        ResourceReference(
          kind=kind,
          key=key,
          node=node,
          urls=self._extract_urls(kind, key, node, value),
          line=line,
          column=column,
        )
      )

  def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
    for decorator in node.decorators:
      call = self.matcher.match(decorator)
      if call is not None:
        self.annotation_count += 1
        self._collect(call)
    return True

"""
Symbol Resolution.

Decorator callees are matched by the symbol they are bound to, not by their
surface text, so ``from uikit.core import Component as Widget`` followed by
``@Widget(...)`` is still recognised as a component annotation.

``SymbolResolver`` is the seam; ``ImportAliasResolver`` is the default
implementation, built from the import statements of a module.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

import libcst as cst

COMPONENT_MARKER = "Component"


def dotted_name(node: cst.BaseExpression) -> Optional[str]:
  """
  Flattens Name / Attribute chains into dotted strings.

  Args:
      node: The CST node to stringify.

  Returns:
      Optional[str]: Dotted path (e.g. "a.b.c") or None for complex expressions.
  """
  if isinstance(node, cst.Name):
    return node.value
  if isinstance(node, cst.Attribute):
    base = dotted_name(node.value)
    if base:
      return f"{base}.{node.attr.value}"
  return None


class SymbolResolver(ABC):
  """
  Maps an expression to the fully qualified name of the symbol it refers to.
  """

  @abstractmethod
  def resolve(self, node: cst.BaseExpression) -> Optional[str]:
    """
    Args:
        node: Expression to resolve (typically a decorator callee).

    Returns:
        Optional[str]: Qualified name, or None if the expression is not a plain reference.
    """
    pass


class _ImportCollector(cst.CSTVisitor):
  """Scans ``import`` and ``from ... import`` statements into an alias map."""

  def __init__(self) -> None:
    self.alias_map: Dict[str, str] = {}

  def visit_Import(self, node: cst.Import) -> Optional[bool]:
    """
    Example: ``import uikit.core as ui`` -> ``alias_map['ui'] = 'uikit.core'``.
    """
    for alias in node.names:
      full_name = dotted_name(alias.name)
      if not full_name:
        continue

      if alias.asname and isinstance(alias.asname.name, cst.Name):
        self.alias_map[alias.asname.name.value] = full_name
      else:
        root = full_name.split(".")[0]
        self.alias_map[root] = root
    return False

  def visit_ImportFrom(self, node: cst.ImportFrom) -> Optional[bool]:
    """
    Example: ``from .core import Component as C`` -> ``alias_map['C'] = '.core.Component'``.
    """
    if isinstance(node.names, cst.ImportStar):
      return False

    dots = "." * len(node.relative)
    module_name = dotted_name(node.module) if node.module else ""
    prefix = f"{dots}{module_name}"

    for alias in node.names:
      imported_name = dotted_name(alias.name)
      if not imported_name:
        continue

      if alias.asname and isinstance(alias.asname.name, cst.Name):
        local_name = alias.asname.name.value
      else:
        local_name = imported_name

      if prefix.endswith(".") or not prefix:
        self.alias_map[local_name] = f"{prefix}{imported_name}"
      else:
        self.alias_map[local_name] = f"{prefix}.{imported_name}"
    return False


class ImportAliasResolver(SymbolResolver):
  """
  Resolves names through the module's import bindings.

  Names that are not bound by an import resolve to themselves, which keeps
  locally defined or unimported ``Component`` markers recognisable.
  """

  def __init__(self, alias_map: Dict[str, str]) -> None:
    self._alias_map = dict(alias_map)

  @classmethod
  def from_module(cls, module: cst.Module) -> "ImportAliasResolver":
    collector = _ImportCollector()
    module.visit(collector)
    return cls(collector.alias_map)

  def resolve(self, node: cst.BaseExpression) -> Optional[str]:
    full_str = dotted_name(node)
    if not full_str:
      return None

    parts = full_str.split(".")
    root = parts[0]

    if root in self._alias_map:
      canonical_root = self._alias_map[root]
      if len(parts) > 1:
        return f"{canonical_root}.{'.'.join(parts[1:])}"
      return canonical_root

    return full_str


class ComponentMatcher:
  """
  Decides whether a decorator is a component annotation.

  A decorator matches when its callee resolves to ``<module>.Component`` with
  ``<module>`` in ``component_modules`` (any module when the list is empty), or
  to the bare name ``Component``.
  """

  def __init__(self, resolver: SymbolResolver, component_modules: Iterable[str] = ()) -> None:
    self.resolver = resolver
    self.component_modules = frozenset(component_modules)

  def is_component_symbol(self, qualified_name: str) -> bool:
    module, _, name = qualified_name.rpartition(".")
    if name != COMPONENT_MARKER:
      return False
    if not module or not self.component_modules:
      return True
    return module in self.component_modules

  def match(self, decorator: cst.Decorator) -> Optional[cst.Call]:
    """
    Returns the decorator call if it is a component annotation.

    Args:
        decorator: Decorator attached to a class definition.

    Returns:
        Optional[cst.Call]: The ``Component(...)`` call, or None.
    """
    expr = decorator.decorator
    if not isinstance(expr, cst.Call):
      return None

    qualified = self.resolver.resolve(expr.func)
    if qualified and self.is_component_symbol(qualified):
      return expr
    return None

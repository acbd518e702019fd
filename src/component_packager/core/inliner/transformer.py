"""
Metadata Inliner Transformer.

Second pass of the inliner: swaps recorded property nodes for their inlined
counterparts. Every other node is returned untouched.
"""

from typing import Dict, List

import libcst as cst

from component_packager.core.inliner.references import PropertyNode, ResourceReference, make_string_literal


def _inline_key(node: PropertyNode, new_key: str) -> PropertyNode:
  if isinstance(node, cst.Arg):
    return node.with_changes(keyword=cst.Name(new_key))

  key = node.key
  if isinstance(key, cst.SimpleString):
    return node.with_changes(key=key.with_changes(value=f"{key.prefix}{key.quote}{new_key}{key.quote}"))
  return node.with_changes(key=make_string_literal(new_key))


def build_template_property(ref: ResourceReference, template: str) -> PropertyNode:
  """
  Replaces ``templateUrl="..."`` with ``template="<content>"``.

  Args:
      ref: The template reference.
      template: Resolved template text.

  Returns:
      The replacement property node.
  """
  return _inline_key(ref.node, ref.inline_key).with_changes(value=make_string_literal(template))


def build_styles_property(ref: ResourceReference, stylesheets: List[str]) -> PropertyNode:
  """
  Replaces ``styleUrls=[...]`` with ``styles=[...]``, one CSS literal per URL.

  The container type (list or tuple), element order, commas and whitespace
  of the original sequence are preserved.
  """
  container = ref.node.value
  elements = [
    element.with_changes(value=make_string_literal(css)) for element, css in zip(container.elements, stylesheets)
  ]
  return _inline_key(ref.node, ref.inline_key).with_changes(value=container.with_changes(elements=elements))


class MetadataInliner(cst.CSTTransformer):
  """
  Applies precomputed property replacements keyed by original node identity.
  """

  def __init__(self, replacements: Dict[int, PropertyNode]) -> None:
    super().__init__()
    self._replacements = replacements

  def leave_Arg(self, original_node: cst.Arg, updated_node: cst.Arg) -> cst.Arg:
    return self._replacements.get(id(original_node), updated_node)

  def leave_DictElement(self, original_node: cst.DictElement, updated_node: cst.DictElement) -> cst.DictElement:
    return self._replacements.get(id(original_node), updated_node)

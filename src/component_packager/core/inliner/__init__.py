"""
Component Metadata Inliner.

Rewrites ``templateUrl`` / ``styleUrls`` properties of component annotations
into inline ``template`` / ``styles`` content.
"""

from component_packager.core.inliner.collector import ComponentCollector
from component_packager.core.inliner.references import PropertyKind, ResourceReference
from component_packager.core.inliner.rewriter import AnnotationRewriter
from component_packager.core.inliner.symbols import ComponentMatcher, ImportAliasResolver, SymbolResolver
from component_packager.core.inliner.transformer import MetadataInliner

__all__ = [
  "AnnotationRewriter",
  "ComponentCollector",
  "ComponentMatcher",
  "ImportAliasResolver",
  "MetadataInliner",
  "PropertyKind",
  "ResourceReference",
  "SymbolResolver",
]

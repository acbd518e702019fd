"""
Annotation Rewriter.

Replaces the file-reference properties of component annotations with inlined
content:

- ``templateUrl="./a.html"`` becomes ``template="<resolved text>"``.
- ``styleUrls=["./a.scss", "./b.less"]`` becomes ``styles=["<css a>", "<css b>"]``.

A unit is rewritten in three steps:

1.  **Collect**: a visitor records every reference and its position.
2.  **Resolve**: templates and stylesheets are read/rendered one at a time,
    in declaration order. The traversal itself performs no I/O.
3.  **Substitute**: a transformer swaps the recorded nodes.

Because every resource is resolved before the tree changes, a failure leaves
no partially inlined annotation: the unit's rewrite is abandoned with a
``MetadataInlineError``. Units without component annotations are returned as-is.
"""

from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

import libcst as cst
from libcst.metadata import MetadataWrapper

from component_packager.config import PackagerSettings
from component_packager.core.inliner.collector import ComponentCollector
from component_packager.core.inliner.references import PropertyKind, PropertyNode, ResourceReference
from component_packager.core.inliner.symbols import ComponentMatcher, ImportAliasResolver, SymbolResolver
from component_packager.core.inliner.transformer import (
  MetadataInliner,
  build_styles_property,
  build_template_property,
)
from component_packager.core.unit import CompilationUnit
from component_packager.errors import MetadataInlineError, PackagerError
from component_packager.resources.template import resolve_resource_path, resolve_template
from component_packager.styles.pipeline import StylesheetPipeline
from component_packager.utils.console import log_debug

TemplateResolver = Callable[[Path, str], Awaitable[str]]
StylesheetSource = Callable[[Path], Awaitable[str]]
ResolverFactory = Callable[[cst.Module], SymbolResolver]


class AnnotationRewriter:
  """
  Inlines templates and stylesheets into component annotations.
  """

  def __init__(
    self,
    project_root: Path,
    settings: Optional[PackagerSettings] = None,
    template_resolver: Optional[TemplateResolver] = None,
    stylesheet_renderer: Optional[StylesheetSource] = None,
    resolver_factory: Optional[ResolverFactory] = None,
  ) -> None:
    """
    Args:
        project_root: Root folder of the package (stylesheet include base).
        settings: Packager settings (component modules, engine commands).
        template_resolver: ``(declaring_file, url) -> text``. Defaults to ``resolve_template``.
        stylesheet_renderer: ``(absolute_path) -> css``. Defaults to the full stylesheet pipeline.
        resolver_factory: Builds the symbol resolver of a module.
    """
    self.project_root = Path(project_root).resolve()
    self.settings = settings or PackagerSettings()
    self.template_resolver = template_resolver or resolve_template
    self.stylesheet_renderer = stylesheet_renderer or self._default_stylesheet_renderer()
    self.resolver_factory = resolver_factory or ImportAliasResolver.from_module

  def _default_stylesheet_renderer(self) -> StylesheetSource:
    pipeline = StylesheetPipeline(self.project_root, self.settings)

    async def render(path: Path) -> str:
      result = await pipeline.render(path)
      return result.css

    return render

  async def _inline(self, unit: CompilationUnit, ref: ResourceReference) -> PropertyNode:
    url = ref.urls[0] if ref.urls else None
    try:
      if ref.kind is PropertyKind.TEMPLATE_URL:
        log_debug(f"inline template {url} into {unit.path}")
        template = await self.template_resolver(unit.path, url)
        return build_template_property(ref, template)

      stylesheets = []
      for url in ref.urls:
        log_debug(f"inline stylesheet {url} into {unit.path}")
        stylesheets.append(await self.stylesheet_renderer(resolve_resource_path(unit.path, url)))
      return build_styles_property(ref, stylesheets)
    except PackagerError as err:
      raise MetadataInlineError(
        unit.path,
        ref.key,
        url=url,
        line=ref.line,
        column=ref.column,
        cause=err,
      ) from err

  async def rewrite_unit(self, unit: CompilationUnit) -> CompilationUnit:
    """
    Rewrites every component annotation of a unit.

    Args:
        unit: The source unit.

    Returns:
        CompilationUnit: A new unit with inlined metadata, or ``unit`` itself if
        it declares no file references.

    Raises:
        MetadataInlineError: If any template or stylesheet cannot be resolved.
    """
    wrapper = MetadataWrapper(unit.module)
    matcher = ComponentMatcher(self.resolver_factory(wrapper.module), self.settings.component_modules)
    collector = ComponentCollector(unit.path, matcher)
    wrapper.visit(collector)

    if not collector.references:
      return unit

    replacements: Dict[int, PropertyNode] = {}
    for ref in collector.references:
      replacements[id(ref.node)] = await self._inline(unit, ref)

    log_debug(f"inlined {len(replacements)} properties in {collector.annotation_count} components of {unit.path}")
    return unit.with_module(wrapper.module.visit(MetadataInliner(replacements)))

  async def rewrite_units(self, units: Iterable[CompilationUnit]) -> List[CompilationUnit]:
    """
    Rewrites units sequentially, stopping at the first failure.

    Units after a failing one are not rewritten.
    """
    rewritten = []
    for unit in units:
      rewritten.append(await self.rewrite_unit(unit))
    return rewritten

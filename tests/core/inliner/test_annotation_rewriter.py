"""
Tests for the Annotation Rewriter.

Verifies:
1. Units without component annotations are returned unchanged (identity).
2. `templateUrl` becomes `template` holding the exact file text.
3. `styleUrls` becomes `styles`, preserving declaration order and container type.
4. Dict-style metadata and snake_case keys are supported.
5. Failures raise `MetadataInlineError` and never partially rewrite a unit.
6. Batch rewriting stops at the failing unit.
"""

import asyncio
from pathlib import Path

import libcst as cst
import pytest

from component_packager.config import PackagerSettings
from component_packager.core.inliner import AnnotationRewriter
from component_packager.core.unit import CompilationUnit
from component_packager.errors import MetadataInlineError, ResourceNotFoundError
from component_packager.resources import resolve_template


async def fake_css(path: Path) -> str:
  """Renders a stylesheet as a comment naming it."""
  return f"/* {path.name} */"


def load(project: Path, rel: str) -> CompilationUnit:
  return CompilationUnit.read(project / rel)


def evaluated_kwargs(code: str, decorator_index: int = 0) -> dict:
  """Evaluates the keyword literals of the first class decorator."""
  module = cst.parse_module(code)
  cls = next(n for n in module.body if isinstance(n, cst.ClassDef))
  call = cls.decorators[decorator_index].decorator
  return {arg.keyword.value: arg.value.evaluated_value for arg in call.args if isinstance(arg.value, cst.SimpleString)}


@pytest.fixture
def rewriter_factory(tmp_path):
  def _make(**kwargs):
    kwargs.setdefault("stylesheet_renderer", fake_css)
    return AnnotationRewriter(tmp_path, PackagerSettings(), **kwargs)

  return _make


@pytest.mark.asyncio
async def test_unit_without_annotation_is_identity(make_project, rewriter_factory):
  code = """
  # comment kept
  import dataclasses


  @dataclasses.dataclass
  class Plain:
      templateUrl: str = "./a.html"
  """
  project = make_project({"plain.py": code})
  unit = load(project, "plain.py")

  result = await rewriter_factory().rewrite_unit(unit)

  assert result is unit
  assert result.code == (project / "plain.py").read_text()


@pytest.mark.asyncio
async def test_template_url_is_inlined(make_project, rewriter_factory):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      @Component(selector="app-card", templateUrl="./a.html")
      class Card:
          pass
      """,
      "a.html": "<p>hi</p>",
    }
  )

  result = await rewriter_factory().rewrite_unit(load(project, "card.py"))

  assert "@Component(selector=\"app-card\", template='<p>hi</p>')" in result.code
  assert "templateUrl" not in result.code


@pytest.mark.asyncio
async def test_template_content_is_exact(make_project, rewriter_factory):
  template = "<div class=\"x\">\r\n  it's \\ {{ value }}\n</div>\n"
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      @Component(templateUrl="./card.html")
      class Card:
          pass
      """,
    }
  )
  (project / "card.html").write_bytes(template.encode("utf-8"))

  result = await rewriter_factory().rewrite_unit(load(project, "card.py"))

  assert evaluated_kwargs(result.code)["template"] == template


@pytest.mark.asyncio
async def test_other_nodes_are_preserved(make_project, rewriter_factory):
  code = """
  import functools
  from uikit.core import Component  # marker


  def helper():  # untouched
      return 1


  @functools.total_ordering
  @Component(
      selector = "app-card",   # odd spacing kept
      templateUrl="./a.html",
  )
  class Card(object):
      '''Doc.'''


  class Other:
      templateUrl = "./a.html"
  """
  project = make_project({"card.py": code, "a.html": "T"})
  original = load(project, "card.py").code

  result = await rewriter_factory().rewrite_unit(load(project, "card.py"))

  expected = original.replace('templateUrl="./a.html",', "template='T',", 1)
  assert result.code == expected


@pytest.mark.asyncio
async def test_style_urls_preserve_order(make_project):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      @Component(styleUrls=["./a.scss", "./b.less", "./c.styl"])
      class Card:
          pass
      """,
    }
  )
  delays = {"a.scss": 0.03, "b.less": 0.0, "c.styl": 0.01}

  async def slow_css(path: Path) -> str:
    await asyncio.sleep(delays[path.name])
    return f"/* {path.name} */"

  rewriter = AnnotationRewriter(project, PackagerSettings(), stylesheet_renderer=slow_css)
  result = await rewriter.rewrite_unit(load(project, "card.py"))

  assert "styles=['/* a.scss */', '/* b.less */', '/* c.styl */']" in result.code
  assert "styleUrls" not in result.code


@pytest.mark.asyncio
async def test_style_urls_receive_absolute_paths(make_project):
  project = make_project(
    {
      "widgets/card.py": """
      from uikit.core import Component

      @Component(styleUrls=("../theme/base.css",))
      class Card:
          pass
      """,
    }
  )
  seen = []

  async def record(path: Path) -> str:
    seen.append(path)
    return "a{}"

  rewriter = AnnotationRewriter(project, PackagerSettings(), stylesheet_renderer=record)
  result = await rewriter.rewrite_unit(load(project, "widgets/card.py"))

  assert seen == [(project / "theme" / "base.css").resolve()]
  assert "styles=('a{}',)" in result.code


@pytest.mark.asyncio
async def test_dict_metadata_form(make_project, rewriter_factory):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      @Component({"selector": "app-card", "templateUrl": "./a.html", 'styleUrls': ['./a.css']})
      class Card:
          pass
      """,
      "a.html": "<b>x</b>",
    }
  )

  result = await rewriter_factory().rewrite_unit(load(project, "card.py"))

  assert "\"template\": '<b>x</b>'" in result.code
  assert "'styles': ['/* a.css */']" in result.code


@pytest.mark.asyncio
async def test_snake_case_keys(make_project, rewriter_factory):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      @Component(template_url="./a.html", style_urls=["./a.css"])
      class Card:
          pass
      """,
      "a.html": "x",
    }
  )

  result = await rewriter_factory().rewrite_unit(load(project, "card.py"))

  assert "@Component(template='x', styles=['/* a.css */'])" in result.code


@pytest.mark.asyncio
async def test_aliased_marker_is_matched(make_project, rewriter_factory):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component as Widget
      import uikit.core as ui

      @Widget(templateUrl="./a.html")
      class A:
          pass

      @ui.Component(templateUrl="./a.html")
      class B:
          pass

      @Template(templateUrl="./a.html")
      class C:
          pass
      """,
      "a.html": "x",
    }
  )

  result = await rewriter_factory().rewrite_unit(load(project, "card.py"))

  assert "@Widget(template='x')" in result.code
  assert "@ui.Component(template='x')" in result.code
  assert '@Template(templateUrl="./a.html")' in result.code


@pytest.mark.asyncio
async def test_component_modules_restrict_matching(make_project):
  project = make_project(
    {
      "card.py": """
      from other.lib import Component

      @Component(templateUrl="./a.html")
      class Card:
          pass
      """,
      "a.html": "x",
    }
  )
  settings = PackagerSettings(component_modules=["uikit.core"])
  rewriter = AnnotationRewriter(project, settings, stylesheet_renderer=fake_css)

  unit = load(project, "card.py")
  result = await rewriter.rewrite_unit(unit)

  assert result is unit


@pytest.mark.asyncio
async def test_nested_component_class(make_project, rewriter_factory):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      def factory():
          @Component(templateUrl="./a.html")
          class Inner:
              pass
          return Inner
      """,
      "a.html": "inner",
    }
  )

  result = await rewriter_factory().rewrite_unit(load(project, "card.py"))

  assert "@Component(template='inner')" in result.code


@pytest.mark.asyncio
async def test_missing_template_raises_metadata_inline_error(make_project, rewriter_factory):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      @Component(
          templateUrl="./missing.html",
      )
      class Card:
          pass
      """,
    }
  )

  with pytest.raises(MetadataInlineError) as exc_info:
    await rewriter_factory().rewrite_unit(load(project, "card.py"))

  err = exc_info.value
  assert err.url == "./missing.html"
  assert err.property_name == "templateUrl"
  assert err.line == 4
  assert err.unit_path == (project / "card.py").resolve()
  assert isinstance(err.cause, ResourceNotFoundError)
  assert isinstance(err.cause.cause, FileNotFoundError)
  assert "missing.html" in str(err)


@pytest.mark.asyncio
async def test_failure_does_not_partially_inline(make_project):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      @Component(templateUrl="./a.html", styleUrls=["./ok.css", "./broken.css"])
      class Card:
          pass
      """,
      "a.html": "x",
    }
  )
  calls = []

  async def flaky(path: Path) -> str:
    calls.append(path.name)
    if path.name == "broken.css":
      raise ResourceNotFoundError(path, FileNotFoundError(path))
    return "ok"

  unit = load(project, "card.py")
  rewriter = AnnotationRewriter(project, PackagerSettings(), stylesheet_renderer=flaky)

  with pytest.raises(MetadataInlineError) as exc_info:
    await rewriter.rewrite_unit(unit)

  assert exc_info.value.url == "./broken.css"
  assert calls == ["ok.css", "broken.css"]
  assert "templateUrl" in unit.code


@pytest.mark.asyncio
async def test_batch_failure_is_scoped_to_failing_unit(make_project):
  project = make_project(
    {
      "bad.py": """
      from uikit.core import Component

      @Component(templateUrl="./nope.html")
      class Bad:
          pass
      """,
      "good.py": """
      from uikit.core import Component

      @Component(templateUrl="./a.html")
      class Good:
          pass
      """,
      "a.html": "x",
    }
  )
  resolved = []

  async def tracking_resolver(declaring_file: Path, url: str) -> str:
    resolved.append(declaring_file.name)
    return await resolve_template(declaring_file, url)

  rewriter = AnnotationRewriter(project, PackagerSettings(), template_resolver=tracking_resolver)
  good, bad = load(project, "good.py"), load(project, "bad.py")

  # The valid unit on its own rewrites fine.
  assert "template='x'" in (await rewriter.rewrite_unit(good)).code

  resolved.clear()
  with pytest.raises(MetadataInlineError) as exc_info:
    await rewriter.rewrite_units([bad, good])

  assert exc_info.value.unit_path == bad.path
  assert resolved == ["bad.py"]
  assert "templateUrl" in good.code


@pytest.mark.asyncio
async def test_non_literal_value_is_rejected(make_project, rewriter_factory):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      TEMPLATE = "./a.html"

      @Component(templateUrl=TEMPLATE)
      class Card:
          pass
      """,
    }
  )

  with pytest.raises(MetadataInlineError, match="string literal"):
    await rewriter_factory().rewrite_unit(load(project, "card.py"))


@pytest.mark.asyncio
async def test_template_and_template_url_conflict(make_project, rewriter_factory):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      @Component(template="<i></i>", templateUrl="./a.html")
      class Card:
          pass
      """,
      "a.html": "x",
    }
  )

  with pytest.raises(MetadataInlineError, match="declared as well"):
    await rewriter_factory().rewrite_unit(load(project, "card.py"))

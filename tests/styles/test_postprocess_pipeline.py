"""
Tests for CSS post-processing and the render + post-process pipeline.

Verifies:
1. Transforms run in order and warnings are logged, never altering the CSS.
2. Autoprefixing hands browser targets to PostCSS via the environment.
3. Engine failures surface as `StylesheetRenderError` naming the stylesheet.
4. Unreadable stylesheets surface as `ResourceNotFoundError`.
"""

import logging
from pathlib import Path
from typing import List

import pytest

from component_packager.errors import ResourceNotFoundError, StylesheetRenderError
from component_packager.styles import postprocess
from component_packager.styles.pipeline import StylesheetPipeline, render_stylesheet
from component_packager.styles.postprocess import (
  AutoprefixerTransform,
  CssTransform,
  PostProcessor,
  RenderedStylesheet,
)
from component_packager.styles.process import EngineOutput


class SuffixTransform(CssTransform):
  def __init__(self, suffix: str, warnings: List[str] = ()) -> None:
    self.suffix = suffix
    self.warnings = list(warnings)

  async def apply(self, css: str, source_path: Path, browsers: List[str]) -> RenderedStylesheet:
    return RenderedStylesheet(css=css + self.suffix, warnings=self.warnings)


@pytest.mark.asyncio
async def test_transforms_run_in_order_and_collect_warnings(tmp_path, caplog):
  processor = PostProcessor(
    transforms=[SuffixTransform("/*1*/", ["first warning"]), SuffixTransform("/*2*/", ["second warning"])]
  )

  with caplog.at_level(logging.WARNING, logger="component_packager"):
    result = await processor.process("a{}", tmp_path / "a.css")

  assert result.css == "a{}/*1*//*2*/"
  assert result.warnings == ["first warning", "second warning"]
  assert "first warning" in caplog.text
  assert "second warning" in caplog.text


@pytest.mark.asyncio
async def test_autoprefixer_passes_browsers_and_collects_stderr(tmp_path, monkeypatch):
  seen = {}

  async def fake_run_engine(command, stdin_text=None, env=None, cwd=None):
    seen.update(command=command, stdin_text=stdin_text, env=env, cwd=cwd)
    return EngineOutput(stdout="a{-webkit-x:1;x:1}", stderr="Gradient has outdated direction syntax\n\n")

  monkeypatch.setattr(postprocess, "run_engine", fake_run_engine)
  transform = AutoprefixerTransform(["postcss", "--use", "autoprefixer"])

  result = await transform.apply("a{x:1}", tmp_path / "a.css", ["ie 11", "chrome 100"])

  assert result.css == "a{-webkit-x:1;x:1}"
  assert result.warnings == ["Gradient has outdated direction syntax"]
  assert seen["command"] == ["postcss", "--use", "autoprefixer"]
  assert seen["stdin_text"] == "a{x:1}"
  assert seen["env"] == {"BROWSERSLIST": "ie 11, chrome 100"}
  assert seen["cwd"] == tmp_path


@pytest.mark.asyncio
async def test_post_process_default_chain(tmp_path, passthrough_settings):
  css = await postprocess.post_process("a { display: flex; }", tmp_path / "a.css", passthrough_settings)
  assert css == "a { display: flex; }"


@pytest.mark.asyncio
async def test_pipeline_renders_less(make_project, passthrough_settings):
  project = make_project({"a.less": "body{color:red}"})

  css = await render_stylesheet(project / "a.less", project, passthrough_settings)

  assert "body {" in css
  assert "color: red;" in css


@pytest.mark.asyncio
async def test_pipeline_less_import_independent_of_cwd(make_project, tmp_path, monkeypatch, passthrough_settings):
  project = make_project(
    {
      "widgets/vars.less": "@c: red;\n",
      "widgets/theme.less": '@import "vars.less";\n.card{color:@c}\n',
    }
  )
  elsewhere = tmp_path / "elsewhere"
  elsewhere.mkdir()
  monkeypatch.chdir(elsewhere)

  css = await render_stylesheet(project / "widgets" / "theme.less", project, passthrough_settings)

  assert "color: red;" in css


@pytest.mark.asyncio
async def test_pipeline_plain_css(make_project, passthrough_settings):
  project = make_project({"a.css": "a { color: blue; }\n"})

  result = await StylesheetPipeline(project, passthrough_settings).render(project / "a.css")

  assert result.css == "a { color: blue; }\n"
  assert result.warnings == []


@pytest.mark.asyncio
async def test_missing_stylesheet(tmp_path, passthrough_settings):
  with pytest.raises(ResourceNotFoundError) as exc_info:
    await render_stylesheet(tmp_path / "nope.scss", tmp_path, passthrough_settings)

  assert isinstance(exc_info.value.cause, FileNotFoundError)


@pytest.mark.asyncio
async def test_engine_failure_is_wrapped(make_project, passthrough_settings):
  project = make_project({"bad.scss": ".a { color: red;"})

  with pytest.raises(StylesheetRenderError) as exc_info:
    await render_stylesheet(project / "bad.scss", project, passthrough_settings)

  assert exc_info.value.path == project / "bad.scss"
  assert "bad.scss" in str(exc_info.value)


@pytest.mark.asyncio
async def test_postprocess_failure_is_wrapped(make_project):
  project = make_project({"a.css": "a{}"})

  class Broken(CssTransform):
    async def apply(self, css, source_path, browsers):
      raise RuntimeError("postcss crashed")

  pipeline = StylesheetPipeline(project, post_processor=PostProcessor(transforms=[Broken()]))

  with pytest.raises(StylesheetRenderError, match="postcss crashed"):
    await pipeline.render(project / "a.css")

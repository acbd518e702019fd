"""
Tests for the single-file `inline_source` entry point.
"""

import pytest

from component_packager import MetadataInlineError, inline_source


def test_inline_source_rewrites_file(make_project, passthrough_settings):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      @Component(templateUrl="./card.html", styleUrls=["./card.css"])
      class Card:
          pass
      """,
      "card.html": "<p>hi</p>",
      "card.css": "p{margin:0}",
    }
  )

  code = inline_source(project / "card.py", settings=passthrough_settings)

  assert "@Component(template='<p>hi</p>', styles=['p{margin:0}'])" in code


def test_inline_source_reports_missing_stylesheet(make_project, passthrough_settings):
  project = make_project(
    {
      "card.py": """
      from uikit.core import Component

      @Component(styleUrls=["./gone.scss"])
      class Card:
          pass
      """,
    }
  )

  with pytest.raises(MetadataInlineError, match="gone.scss"):
    inline_source(project / "card.py", settings=passthrough_settings)

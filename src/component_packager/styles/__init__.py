"""
Stylesheet Rendering Package.

- ``renderers``: Engine adapters (CSS, Sass, Less, Stylus).
- ``dispatcher``: Extension based engine selection.
- ``postprocess``: Vendor prefixing chain with warning collection.
- ``pipeline``: Atomic render + post-process per stylesheet.
"""

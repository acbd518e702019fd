"""
Core Package.

- Compilation units (parsed LibCST modules).
- The component annotation inliner.
"""

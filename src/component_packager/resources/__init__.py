"""
Resource Resolution Package.

Resolves file references declared by component annotations and reads them.
"""

from component_packager.resources.template import read_resource, resolve_resource_path, resolve_template

__all__ = ["read_resource", "resolve_resource_path", "resolve_template"]

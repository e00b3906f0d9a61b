"""
patch_map — patch selection and composition for static runtime builds.

Decides which textual patches apply to which files of a Ruby source tree
for a given target OS and runtime version, and applies them.
"""

__version__ = "0.1.0"
PATCH_MAP_VERSION = "v0"
PACKAGE_NAME = "patch_map"
SCHEMA_VERSION = "0.1"

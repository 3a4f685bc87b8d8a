"""canopy-registry: builds and validates the UI artifact registry.

The registry publishes components, visual templates, context providers and
design tokens as JSON documents plus templated source files that the
installer CLI downloads by URL.
"""

__version__ = "1.0.0"

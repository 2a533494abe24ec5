"""archgen -- multi-pattern application scaffolding for .NET source trees.

Generates layered source files for one of five architectural patterns
(clean, ddd, cqrs, service-repository, minimal-api) from a declarative entity
descriptor, and classifies existing trees to recover their pattern and
folder layout.
"""

__version__ = "0.1.0"

"""API description parser -- load, resolve ``$ref`` pointers, and extract endpoints.

This sub-package is responsible for the first half of the specdocs pipeline:
turning raw OpenAPI 3.x or Swagger 2.0 text (JSON or YAML) into a
:class:`~specdocs.models.SpecDocument`, and that document into the
:class:`~specdocs.models.EndpointModel` consumed by documentation renderers.

Typical usage::

    from specdocs.parser import load
    from specdocs.parser.extractor import extract

    doc = load(Path("openapi/v1.yaml").read_text(encoding="utf-8"))
    model = extract(doc)

Sub-modules:

* :mod:`~specdocs.parser.loader` -- JSON/YAML parsing plus structural
  validation.
* :mod:`~specdocs.parser.schema` -- Classification of raw schemas into the
  :data:`~specdocs.models.SchemaNode` variants.
* :mod:`~specdocs.parser.resolver` -- ``$ref`` resolution with
  circular-reference detection.
* :mod:`~specdocs.parser.extractor` -- Walks the document and produces the
  endpoint model. Imported explicitly because it depends on
  :mod:`specdocs.examples`, which itself depends on the resolver.
"""

from specdocs.parser.loader import load, parse_content, validate_spec
from specdocs.parser.resolver import resolve, resolve_pointer
from specdocs.parser.schema import parse_schema

__all__ = [
    "load",
    "parse_content",
    "validate_spec",
    "resolve",
    "resolve_pointer",
    "parse_schema",
]

"""Synthesize representative example values from schema nodes.

:class:`ExampleSynthesizer` walks a :data:`~specdocs.models.SchemaNode`
top-down and produces a plain Python value (dicts, lists, strings, numbers,
booleans) that fits the declared shape. Renderers show these values as the
"Example request" and "Example response" blocks of an endpoint page.

Rules, evaluated per node:

* **reference** -- resolved through :func:`~specdocs.parser.resolver.resolve`,
  then synthesized. Re-entering a definition that is already being
  synthesized raises :class:`~specdocs.exceptions.CyclicReferenceError`.
* **object** -- one key per declared property, except properties that are
  nullable *and* not required, which are omitted.
* **array** -- a one-element list holding the synthesized item, or ``[]``.
* **string** -- explicit example, then ``format``, then the first ``enum``
  member, then a heuristic keyed on the property name, then
  ``"example-value"``.
* **integer / number** -- explicit example, then ``minimum``, then ``100`` /
  ``10.5``.
* **boolean** -- explicit example, then ``True``.
* **unknown** -- explicit example, else ``None``.

The synthesizer is pure: the only input besides the node is the clock used
for ``date-time`` strings, which can be pinned with ``now``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from specdocs.exceptions import CyclicReferenceError
from specdocs.models import (
    ArraySchema,
    BooleanSchema,
    NumberSchema,
    ObjectSchema,
    RefSchema,
    SchemaNode,
    StringSchema,
    UnknownSchema,
)
from specdocs.parser.resolver import resolve

EXAMPLE_UUID = "a1b2c3d4-e5f6-7890-abcd-ef1234567890"
EXAMPLE_EMAIL = "user@example.com"
EXAMPLE_URI = "https://api.example.com/v1/example"
DEFAULT_STRING = "example-value"
DEFAULT_INTEGER = 100
DEFAULT_NUMBER = 10.5

# Checked in order against the lower-cased property name; first match wins.
_NAME_HINTS: tuple[tuple[str, str], ...] = (
    ("email", EXAMPLE_EMAIL),
    ("phone", "1234567890"),
    ("first_name", "John"),
    ("firstname", "John"),
    ("last_name", "Doe"),
    ("lastname", "Doe"),
    ("cname", "www.example.com"),
    ("name", "Example Name"),
    ("description", "Example description"),
    ("message", "Operation completed successfully"),
    ("url", "https://example.com"),
    ("domain", "example.com"),
    ("version", "1.0.0"),
    ("status", "active"),
    ("environment", "production"),
    ("role", "full"),
    ("fingerprint", "a1:b2:c3:d4:e5:f6:a7:b8:c9:d0:e1:f2:a3:b4:c5:d6"),
    ("public_key", "ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQ... user@example.com"),
    ("comment", EXAMPLE_EMAIL),
)


class ExampleSynthesizer:
    """Produce example values for schemas of one document.

    Args:
        definitions: The document's definitions table, used to resolve
            references.
        now: Timestamp used for ``date-time`` strings. Defaults to the
            current UTC time, read once when the synthesizer is created.

    Example::

        synth = ExampleSynthesizer(doc.definitions)
        body = synth.synthesize(doc.definitions["Account"])
    """

    def __init__(
        self,
        definitions: Mapping[str, SchemaNode],
        now: Optional[datetime] = None,
    ) -> None:
        self._definitions = definitions
        self._now = now or datetime.now(timezone.utc)

    def synthesize(self, node: Optional[SchemaNode], name: str = "") -> Any:
        """Return an example value for *node*.

        Args:
            node: The schema to synthesize, or ``None``.
            name: Property name the schema is declared under; drives the
                string heuristics.

        Returns:
            The example value, or ``None`` when *node* is ``None`` or
            describes nothing concrete.

        Raises:
            SchemaResolutionError: If a reference cannot be resolved.
            CyclicReferenceError: If the schema refers back to itself.
        """
        return self._synthesize(node, name, ())

    def _synthesize(self, node: Optional[SchemaNode], name: str, active: tuple[str, ...]) -> Any:
        if node is None:
            return None
        if isinstance(node, RefSchema):
            if node.name in active:
                raise CyclicReferenceError([*active, node.name])
            target = resolve(node, self._definitions)
            return self._synthesize(target, name, (*active, node.name))
        if isinstance(node, ObjectSchema):
            return self._object(node, active)
        if isinstance(node, ArraySchema):
            return self._array(node, name, active)
        if isinstance(node, StringSchema):
            return self._string(node, name)
        if isinstance(node, NumberSchema):
            return self._number(node)
        if isinstance(node, BooleanSchema):
            return node.example if node.example is not None else True
        if isinstance(node, UnknownSchema):
            return node.example
        raise TypeError(f"Unsupported schema node: {type(node).__name__}")

    def _object(self, node: ObjectSchema, active: tuple[str, ...]) -> Any:
        if node.example is not None:
            return node.example
        result: dict[str, Any] = {}
        for prop_name, prop in node.properties.items():
            if prop.nullable and prop_name not in node.required:
                continue
            result[prop_name] = self._synthesize(prop, prop_name, active)
        return result

    def _array(self, node: ArraySchema, name: str, active: tuple[str, ...]) -> Any:
        if node.example is not None:
            return node.example
        item = self._synthesize(node.items, name, active)
        return [item] if item is not None else []

    def _string(self, node: StringSchema, name: str) -> Any:
        if node.example is not None:
            return node.example
        if node.format == "uuid":
            return EXAMPLE_UUID
        if node.format == "email":
            return EXAMPLE_EMAIL
        if node.format == "date-time":
            return _iso_timestamp(self._now)
        if node.format == "uri":
            return EXAMPLE_URI
        if node.enum:
            return node.enum[0]
        return string_for_name(name)

    @staticmethod
    def _number(node: NumberSchema) -> Any:
        if node.example is not None:
            return node.example
        if node.minimum is not None:
            return node.minimum
        return DEFAULT_INTEGER if node.kind == "integer" else DEFAULT_NUMBER


def synthesize(
    node: Optional[SchemaNode],
    definitions: Mapping[str, SchemaNode],
    name: str = "",
    now: Optional[datetime] = None,
) -> Any:
    """Synthesize one example without keeping an :class:`ExampleSynthesizer` around."""
    return ExampleSynthesizer(definitions, now=now).synthesize(node, name)


def string_for_name(name: str) -> str:
    """Return a canned string for a property called *name*.

    >>> string_for_name("contact_email")
    'user@example.com'
    >>> string_for_name("zzz")
    'example-value'
    """
    lowered = name.lower()
    for needle, value in _NAME_HINTS:
        if needle in lowered:
            return value
    return DEFAULT_STRING


def _iso_timestamp(when: datetime) -> str:
    """Format *when* like ``2024-01-15T10:30:00.000Z``."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + (
        f"{when.microsecond // 1000:03d}Z"
    )

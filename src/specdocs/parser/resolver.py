"""Resolve ``$ref`` references against a document's definitions table.

Two kinds of reference appear in API descriptions:

* **Schema references** (``#/definitions/Pet``, ``#/components/schemas/Pet``)
  are parsed into :class:`~specdocs.models.RefSchema` nodes that keep only
  the target name. :func:`resolve` looks that name up in the definitions
  table and follows reference-to-reference chains until it reaches a
  concrete node.
* **Other internal references** (``#/parameters/limit``,
  ``#/components/parameters/limit``) point at raw parameter objects and are
  followed by :func:`resolve_pointer` as RFC 6901 JSON Pointers.

Both functions are read-only: the document is never mutated or copied.
Reference chains are guarded by a visited-name set, and revisiting a name
raises :class:`~specdocs.exceptions.CyclicReferenceError` instead of
recursing forever.
"""

from __future__ import annotations

from typing import Any, Mapping

from specdocs.exceptions import CyclicReferenceError, SchemaResolutionError
from specdocs.models import RefSchema, SchemaNode


def resolve(node: SchemaNode, definitions: Mapping[str, SchemaNode]) -> SchemaNode:
    """Return the concrete schema *node* stands for.

    Non-reference nodes are returned unchanged. A reference is looked up in
    *definitions*; if the target is itself a reference, the chain is
    followed.

    Args:
        node: Any schema node.
        definitions: The document's definitions table.

    Returns:
        The first non-reference node along the chain.

    Raises:
        SchemaResolutionError: If a reference names a missing definition.
        CyclicReferenceError: If the chain revisits a definition.

    Example::

        doc = load(text)
        concrete = resolve(RefSchema(ref="#/definitions/Pet", name="Pet"), doc.definitions)
    """
    seen: list[str] = []
    while isinstance(node, RefSchema):
        if node.name in seen:
            raise CyclicReferenceError([*seen, node.name])
        seen.append(node.name)
        target = definitions.get(node.name)
        if target is None:
            raise SchemaResolutionError(
                f"Cannot resolve $ref '{node.ref}': "
                f"no definition named '{node.name}'",
                ref=node.ref,
            )
        node = target
    return node


def resolve_pointer(ref: str, root: Mapping[str, Any]) -> Any:
    """Resolve a single internal ``$ref`` string against the raw document.

    Parses JSON Pointer references like ``#/parameters/limit`` and
    navigates the root mapping to locate the referenced value.  Handles
    RFC 6901 JSON Pointer escaping (``~0`` for ``~``, ``~1`` for ``/``).

    Args:
        ref: The ``$ref`` string (e.g., ``"#/components/parameters/limit"``).
        root: The raw document mapping to resolve against.

    Returns:
        The value found at the referenced path.

    Raises:
        SchemaResolutionError: If the reference is external (does not start
            with ``#/``), or if any segment in the pointer path does not
            exist in the document.
    """
    if not ref.startswith("#/"):
        raise SchemaResolutionError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled.",
            ref=ref,
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, Mapping):
            if segment not in current:
                raise SchemaResolutionError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found at path",
                    ref=ref,
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SchemaResolutionError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'",
                    ref=ref,
                ) from exc
        else:
            raise SchemaResolutionError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}",
                ref=ref,
            )

    return current

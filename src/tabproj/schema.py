"""Build and index JSON Schema documents.

Building checks the document against its dialect's meta-schema.  Indexing
registers the document (and any embedded ``$id`` sub-resources) so that
``$ref`` lookups can be answered, then eagerly resolves every reference so
dangling ones fail here rather than during inference.

Usage::

    from tabproj.schema import build_schema, index_schema

    index = index_schema(build_schema({"type": "object", ...}))
    resolved = index.resolver().lookup("#/$defs/address")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping

from jsonschema.exceptions import SchemaError
from jsonschema.validators import Draft202012Validator, validator_for
from referencing import Anchor, Registry, Resource, Specification
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT3 as _DRAFT3, DRAFT202012

from tabproj.errors import SchemaBuildError, SchemaIndexError

if TYPE_CHECKING:
    from referencing._core import Resolver

log = logging.getLogger(__name__)

# Base URI for schemas that do not declare their own ``$id``.
PLACEHOLDER_URI = "tabproj://placeholder/schema.json"

# Schema that accepts any JSON value.
PERMISSIVE_SCHEMA = True


def _draft3_subresources(contents: Mapping) -> Iterable[Mapping]:
    # "extends" may be a single schema, and "type" lists may hold schemas
    rest = {key: value for key, value in contents.items() if key != "extends"}
    yield from _DRAFT3.subresources_of(rest)

    extends = contents.get("extends")
    if isinstance(extends, Mapping):
        yield extends
    elif isinstance(extends, list):
        yield from extends

    declared = contents.get("type")
    if isinstance(declared, list):
        yield from (member for member in declared if isinstance(member, Mapping))


def _draft3_anchors(specification: Specification, contents: Mapping) -> list[Anchor]:
    return [
        Anchor(name=anchor.name, resource=specification.create_resource(anchor.resource.contents))
        for anchor in _DRAFT3.anchors_in(contents)
    ]


# Draft 3 as understood by ``referencing``, extended to every place a draft 3
# schema can nest another one.
DRAFT3 = Specification(
    name=_DRAFT3.name,
    id_of=_DRAFT3.id_of,
    subresources_of=_draft3_subresources,
    anchors_in=_draft3_anchors,
    maybe_in_subresource=_DRAFT3.maybe_in_subresource,
)


@dataclass(frozen=True)
class SchemaIndex:
    """A schema registered for reference resolution.

    Attributes:
        root: The root schema document (object or boolean).
        uri: Base URI of the root document.
        specification: JSON Schema dialect the document is interpreted with.
        registry: :class:`referencing.Registry` holding the root and its
            embedded sub-resources.
    """

    root: Any
    uri: str
    specification: Specification
    registry: Registry

    def resolver(self) -> Resolver:
        """Return a resolver scoped at the root document."""
        return self.registry.resolver(base_uri=self.uri)

    def subresource(self, contents: Any) -> Resource:
        """Wrap a subschema of this document as a resource of the same dialect."""
        return self.specification.create_resource(contents)


def build_schema(document: Any) -> Resource:
    """Check *document* is a structurally valid schema and wrap it as a resource.

    The dialect is taken from ``$schema`` when present, else Draft 2020-12.

    Raises:
        SchemaBuildError: If the document is not an object/boolean or fails
            the meta-schema check.
    """
    if not isinstance(document, (dict, bool)):
        raise SchemaBuildError(
            TypeError(f"schema must be a JSON object or boolean, not {type(document).__name__}")
        )

    validator_cls = validator_for(document, default=Draft202012Validator)
    try:
        validator_cls.check_schema(document)
    except SchemaError as err:
        raise SchemaBuildError(err) from err

    specification = _specification_of(document)
    return specification.create_resource(document)


def index_schema(resource: Resource, uri: str | None = None) -> SchemaIndex:
    """Register *resource* and verify that every ``$ref`` inside it resolves.

    Parameters:
        resource: A resource returned by :func:`build_schema`.
        uri: Base URI to register the root under when it declares no ``$id``.

    Raises:
        SchemaIndexError: If any reference cannot be resolved.  Remote
            documents are never retrieved, so external references fail too.
    """
    base_uri = resource.id() or uri or PLACEHOLDER_URI
    registry = Registry().with_resource(base_uri, resource).crawl()

    index = SchemaIndex(
        root=resource.contents,
        uri=base_uri,
        specification=_specification_of(resource.contents),
        registry=registry,
    )

    count = 0
    for ref, resolver in _references(resource, index.resolver()):
        try:
            resolver.lookup(ref)
        except Unresolvable as err:
            raise SchemaIndexError(err) from err
        count += 1

    log.debug("indexed schema %s with %d resolved references", base_uri, count)
    return index


def _references(resource: Resource, resolver: Resolver) -> Iterator[tuple[str, Resolver]]:
    """Yield every ``$ref`` in *resource* with the resolver in scope at that point."""
    contents = resource.contents
    if isinstance(contents, dict) and isinstance(contents.get("$ref"), str):
        yield contents["$ref"], resolver

    for sub in resource.subresources():
        yield from _references(sub, resolver.in_subresource(sub))


def _specification_of(document: Any) -> Specification:
    """Dialect named by ``$schema``, else Draft 2020-12."""
    specification = DRAFT202012.detect(document)
    if specification == _DRAFT3:
        return DRAFT3
    return specification

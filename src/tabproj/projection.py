"""Projections of tabular fields into (possibly nested) JSON documents.

A projection table maps collated field names to the location and type
information needed to place a parsed column value.  It is built in two
passes over a plain dict:

1. every location the schema reaches contributes several derived names
   (``foo_bar``, ``foo bar``, ``foobar``, ``/foo/bar``, ...);
2. explicit projections from the configuration are applied on top and
   always win.

Usage::

    from tabproj.projection import build_projections, lookup

    table = build_projections(config)
    info = lookup(table, "Bee Loc")
    if info is not None:
        place(value, info.target_location, info.possible_types)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from tabproj.collate import collate
from tabproj.config import ParseConfig
from tabproj.inference import SchemaInferrer, ShapeInferrer, ShapeModel
from tabproj.jsontypes import JsonType
from tabproj.pointer import Pointer, render_token
from tabproj.schema import PERMISSIVE_SCHEMA, build_schema, index_schema

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeInfo:
    """Information known about a specific location within a JSON document.

    Attributes:
        target_location: Where the value goes.
        must_exist: True only when the schema guarantees the location is present.
        possible_types: Possible JSON types, or None when nothing could be
            inferred (an unresolved projection).
    """

    target_location: Pointer
    must_exist: bool
    possible_types: JsonType | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_location": str(self.target_location),
            "must_exist": self.must_exist,
            "possible_types": None if self.possible_types is None else self.possible_types.names(),
        }


ProjectionTable = Mapping[str, TypeInfo]


def derive_field_names(pointer: Pointer | str) -> list[str]:
    """Return the collated field names that should map to *pointer*.

    Covers the usual ways a nested location is spelled as a column header:
    joined with ``_``, with spaces, with no delimiter, or as the pointer itself
    (with or without its leading slash).  A top-level property also matches
    with its underscores written as spaces.  The root yields no names.
    """
    if isinstance(pointer, str):
        pointer = Pointer.from_str(pointer)
    if pointer.is_root:
        return []

    parts = [render_token(t) for t in pointer]
    rendered = str(pointer)

    variants = [
        "_".join(parts),
        " ".join(parts),
        "".join(parts),
        rendered,
        rendered[1:],
    ]
    # Only for root properties: "foo_bar/baz" must never become "foo bar baz".
    if len(parts) == 1:
        variants.append(parts[0].replace("_", " "))

    return sorted({collate(v) for v in variants})


def schema_projections(shape: ShapeModel) -> dict[str, TypeInfo]:
    """First pass: derived names for every location of *shape*.

    When two locations derive the same name, the later one in traversal
    order wins.
    """
    results: dict[str, TypeInfo] = {}
    for pointer, types, required in shape.locations():
        info = TypeInfo(target_location=pointer, must_exist=required, possible_types=types)
        for name in derive_field_names(pointer):
            results[name] = info
    return results


def apply_overrides(
    results: dict[str, TypeInfo],
    projections: Mapping[str, str],
    shape: ShapeModel,
) -> dict[str, TypeInfo]:
    """Second pass: write configured projections into *results*, overwriting.

    A projection whose pointer the schema does not reach still gets an entry,
    with no type information, since the location may accept any value.
    """
    for field_name, raw_pointer in projections.items():
        target = Pointer.from_str(raw_pointer)
        located = shape.locate(target)
        if located is not None:
            types, required = located
            info = TypeInfo(target_location=target, must_exist=required, possible_types=types)
        else:
            log.warning(
                "could not locate projection within schema: field=%r pointer=%r",
                field_name,
                raw_pointer,
                extra={"field": field_name, "pointer": raw_pointer},
            )
            info = TypeInfo(target_location=target, must_exist=False, possible_types=None)
        results[collate(field_name)] = info
    return results


def build_projections(config: ParseConfig, inferrer: ShapeInferrer | None = None) -> ProjectionTable:
    """Resolve the projection table for *config*.

    Runs shape inference over the configured schema (or a schema accepting
    anything when none is set) and layers the configured projections over
    the derived names.

    Parameters:
        config: Schema and projections to resolve.
        inferrer: Shape inference engine.  Defaults to :class:`SchemaInferrer`.

    Returns:
        A read-only mapping from collated field name to :class:`TypeInfo`,
        with keys in sorted order.

    Raises:
        SchemaBuildError: If the schema is not a valid JSON Schema.
        SchemaIndexError: If a reference in the schema cannot be resolved.
    """
    document = PERMISSIVE_SCHEMA if config.json_schema is None else config.json_schema
    index = index_schema(build_schema(document))
    shape = (inferrer or SchemaInferrer()).infer(index)

    results = schema_projections(shape)
    log.debug("derived %d field names from schema", len(results))

    results = apply_overrides(results, config.projections, shape)
    log.debug("applied %d configured projections", len(config.projections))

    return MappingProxyType(dict(sorted(results.items())))


def lookup(table: ProjectionTable, header: str) -> TypeInfo | None:
    """Find the projection for a raw column *header*, collating it first."""
    return table.get(collate(header))


def table_to_json(table: ProjectionTable) -> dict[str, dict[str, Any]]:
    """Render *table* as JSON-ready data."""
    return {name: info.to_dict() for name, info in table.items()}

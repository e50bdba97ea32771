"""Shape inference: which types may appear where, and what must be present.

Projection building only needs two questions answered about a schema:

- every location reachable in a conforming document, with its possible
  types and whether it must exist (:meth:`ShapeModel.locations`);
- the same information for one given location (:meth:`ShapeModel.locate`).

Both are expressed as the :class:`ShapeInferrer` / :class:`ShapeModel`
protocols so another inference engine can be dropped in.  The default
:class:`SchemaInferrer` walks the indexed schema and folds ``$ref``,
``allOf``, ``anyOf`` and ``oneOf`` into a single :class:`Shape` tree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import reduce
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Protocol, runtime_checkable

from tabproj.jsontypes import JsonType
from tabproj.pointer import NEXT_INDEX, Pointer
from tabproj.schema import DRAFT3, SchemaIndex

if TYPE_CHECKING:
    from referencing._core import Resolver

log = logging.getLogger(__name__)


# ─── Capability interfaces ───────────────────────────────────────────────────


@runtime_checkable
class ShapeModel(Protocol):
    """Inferred shape of every location in a schema."""

    def locations(self) -> Iterable[tuple[Pointer, JsonType, bool]]: ...

    def locate(self, pointer: Pointer) -> tuple[JsonType, bool] | None: ...


@runtime_checkable
class ShapeInferrer(Protocol):
    """Builds a :class:`ShapeModel` from an indexed schema."""

    def infer(self, index: SchemaIndex) -> ShapeModel: ...


# ─── Shape tree ──────────────────────────────────────────────────────────────


class Exists(Enum):
    """Whether a location is present in every conforming document."""

    MUST = "must"
    MAY = "may"


@dataclass
class ObjProperty:
    name: str
    shape: Shape
    required: bool = False


@dataclass
class Shape:
    """Inferred constraints for one location.

    Attributes:
        type_: Possible JSON types.
        properties: Named properties, sorted by name.
        additional_properties: Shape of properties not named in
            ``properties``, or None when the schema says nothing about them.
        tuple_items: Shapes of positional array items.
        additional_items: Shape of items past ``tuple_items``, or None.
        min_items: Minimum array length.
    """

    type_: JsonType = JsonType.ANY
    properties: list[ObjProperty] = field(default_factory=list)
    additional_properties: Shape | None = None
    tuple_items: list[Shape] = field(default_factory=list)
    additional_items: Shape | None = None
    min_items: int = 0

    def get_property(self, name: str) -> ObjProperty | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


def _child_exists(parent: Exists, parent_type: JsonType, container: JsonType, required: bool) -> Exists:
    # A child can only be guaranteed when its parent is guaranteed to be this container.
    if parent is Exists.MUST and required and parent_type in container:
        return Exists.MUST
    return Exists.MAY


def intersect(lhs: Shape, rhs: Shape) -> Shape:
    """Shape of a location that must satisfy both *lhs* and *rhs*."""
    names = sorted({p.name for p in lhs.properties} | {p.name for p in rhs.properties})
    properties: list[ObjProperty] = []
    for name in names:
        lp, rp = lhs.get_property(name), rhs.get_property(name)
        if lp and rp:
            properties.append(ObjProperty(name, intersect(lp.shape, rp.shape), lp.required or rp.required))
        else:
            own, other = (lp, rhs) if lp else (rp, lhs)
            shape = intersect(own.shape, other.additional_properties) if other.additional_properties else own.shape
            properties.append(ObjProperty(name, shape, own.required))

    tuple_items: list[Shape] = []
    for i in range(max(len(lhs.tuple_items), len(rhs.tuple_items))):
        li = lhs.tuple_items[i] if i < len(lhs.tuple_items) else lhs.additional_items
        ri = rhs.tuple_items[i] if i < len(rhs.tuple_items) else rhs.additional_items
        if li and ri:
            tuple_items.append(intersect(li, ri))
        else:
            tuple_items.append(li or ri)

    return Shape(
        type_=lhs.type_ & rhs.type_,
        properties=properties,
        additional_properties=_intersect_optional(lhs.additional_properties, rhs.additional_properties),
        tuple_items=tuple_items,
        additional_items=_intersect_optional(lhs.additional_items, rhs.additional_items),
        min_items=max(lhs.min_items, rhs.min_items),
    )


def _intersect_optional(lhs: Shape | None, rhs: Shape | None) -> Shape | None:
    if lhs and rhs:
        return intersect(lhs, rhs)
    return lhs or rhs


def union(lhs: Shape, rhs: Shape) -> Shape:
    """Shape of a location that satisfies *lhs* or *rhs*.

    Object (or array) details are only merged when both sides may be objects
    (arrays); otherwise the side that can be one is taken as-is.
    """
    out = Shape(type_=lhs.type_ | rhs.type_)

    l_obj, r_obj = lhs.type_.overlaps(JsonType.OBJECT), rhs.type_.overlaps(JsonType.OBJECT)
    if l_obj and r_obj:
        names = sorted({p.name for p in lhs.properties} | {p.name for p in rhs.properties})
        for name in names:
            lp, rp = lhs.get_property(name), rhs.get_property(name)
            if lp and rp:
                out.properties.append(ObjProperty(name, union(lp.shape, rp.shape), lp.required and rp.required))
            else:
                own, other = (lp, rhs) if lp else (rp, lhs)
                out.properties.append(ObjProperty(name, union(own.shape, other.additional_properties or Shape())))
        if lhs.additional_properties and rhs.additional_properties:
            out.additional_properties = union(lhs.additional_properties, rhs.additional_properties)
    else:
        side = lhs if l_obj else rhs
        out.properties = list(side.properties)
        out.additional_properties = side.additional_properties

    l_arr, r_arr = lhs.type_.overlaps(JsonType.ARRAY), rhs.type_.overlaps(JsonType.ARRAY)
    if l_arr and r_arr:
        for i in range(max(len(lhs.tuple_items), len(rhs.tuple_items))):
            li = lhs.tuple_items[i] if i < len(lhs.tuple_items) else lhs.additional_items
            ri = rhs.tuple_items[i] if i < len(rhs.tuple_items) else rhs.additional_items
            out.tuple_items.append(union(li or Shape(), ri or Shape()))
        if lhs.additional_items and rhs.additional_items:
            out.additional_items = union(lhs.additional_items, rhs.additional_items)
        out.min_items = min(lhs.min_items, rhs.min_items)
    else:
        side = lhs if l_arr else rhs
        out.tuple_items = list(side.tuple_items)
        out.additional_items = side.additional_items
        out.min_items = side.min_items

    return out


# ─── Default inference engine ────────────────────────────────────────────────


class SchemaInferrer:
    """Infers a :class:`Shape` tree directly from JSON Schema keywords."""

    def infer(self, index: SchemaIndex) -> InferredShape:
        root = _Walker(index).shape(index.root, index.resolver())
        model = InferredShape(root)
        log.debug("inferred shape for %s", index.uri)
        return model


class _Walker:
    def __init__(self, index: SchemaIndex):
        self.index = index
        # ids of subschemas currently being expanded through $ref
        self.active_refs: set[int] = set()
        # draft 3 keywords such as "extends" only apply to draft 3 documents
        self.legacy = index.specification == DRAFT3

    def shape(self, node: Any, resolver: Resolver) -> Shape:
        if node is True:
            return Shape()
        if node is False:
            return Shape(type_=JsonType.NONE)

        if "$id" in node or "id" in node:
            resolver = resolver.in_subresource(self.index.subresource(node))

        shape = Shape(type_=self._declared_types(node))

        required = node.get("required", [])
        if not isinstance(required, list):
            # draft 3 puts a boolean "required" on the property itself
            required = []
        additional = node.get("additionalProperties")
        if additional is not None and additional is not False:
            shape.additional_properties = self.shape(additional, resolver)

        props: dict[str, ObjProperty] = {}
        for name, sub in node.get("properties", {}).items():
            is_required = name in required or (isinstance(sub, dict) and sub.get("required") is True)
            props[name] = ObjProperty(name, self.shape(sub, resolver), is_required)
        for name in required:
            if name not in props:
                props[name] = ObjProperty(name, shape.additional_properties or Shape(), True)
        shape.properties = [props[name] for name in sorted(props)]

        items = node.get("items")
        if isinstance(items, list):
            positional, rest = items, node.get("additionalItems")
        else:
            positional, rest = node.get("prefixItems", []), items
        shape.tuple_items = [self.shape(sub, resolver) for sub in positional]
        if rest is not None and rest is not False:
            shape.additional_items = self.shape(rest, resolver)
        shape.min_items = node.get("minItems", 0)

        declared = node.get("type")
        if isinstance(declared, list) and not all(isinstance(t, str) for t in declared):
            # draft 3 union types may mix type names with schemas
            branches = [
                self.shape(t, resolver) if isinstance(t, dict) else Shape(type_=self._named_type(t))
                for t in declared
            ]
            shape = intersect(shape, reduce(union, branches))

        ref = node.get("$ref")
        if isinstance(ref, str):
            shape = intersect(shape, self._resolve(ref, resolver))

        for sub in node.get("allOf", []):
            shape = intersect(shape, self.shape(sub, resolver))

        if self.legacy and "extends" in node:
            extends = node["extends"]
            for sub in extends if isinstance(extends, list) else [extends]:
                shape = intersect(shape, self.shape(sub, resolver))

        for keyword in ("anyOf", "oneOf"):
            if node.get(keyword):
                branches = [self.shape(sub, resolver) for sub in node[keyword]]
                shape = intersect(shape, reduce(union, branches))

        return shape

    def _resolve(self, ref: str, resolver: Resolver) -> Shape:
        resolved = resolver.lookup(ref)
        key = id(resolved.contents)
        if key in self.active_refs:
            # recursive schema; stop expanding here
            return Shape()
        self.active_refs.add(key)
        try:
            return self.shape(resolved.contents, resolved.resolver)
        finally:
            self.active_refs.discard(key)

    def _declared_types(self, node: dict) -> JsonType:
        types = JsonType.ANY
        declared = node.get("type")
        if isinstance(declared, str):
            types &= self._named_type(declared)
        elif isinstance(declared, list) and all(isinstance(t, str) for t in declared):
            types &= reduce(lambda acc, n: acc | self._named_type(n), declared, JsonType.NONE)
        if "const" in node:
            types &= JsonType.of_value(node["const"])
        if "enum" in node:
            types &= reduce(lambda acc, v: acc | JsonType.of_value(v), node["enum"], JsonType.NONE)
        return types

    @staticmethod
    def _named_type(name: str) -> JsonType:
        try:
            return JsonType.from_name(name)
        except ValueError:
            # draft 3 allows custom type names, which constrain nothing we can see
            log.debug("treating unknown type %r as any", name)
            return JsonType.ANY


class InferredShape:
    """:class:`ShapeModel` backed by a :class:`Shape` tree."""

    def __init__(self, root: Shape):
        self.root = root

    def walk(self) -> Iterator[tuple[Pointer, Shape, Exists]]:
        """Yield every reachable location depth-first, the root first.

        Properties come in name order, then positional items, then ``/-``
        for any further array item.
        """
        yield from self._walk(Pointer(), self.root, Exists.MUST)

    def _walk(self, ptr: Pointer, shape: Shape, exists: Exists) -> Iterator[tuple[Pointer, Shape, Exists]]:
        yield ptr, shape, exists

        if shape.type_.overlaps(JsonType.OBJECT):
            for prop in shape.properties:
                child = _child_exists(exists, shape.type_, JsonType.OBJECT, prop.required)
                yield from self._walk(ptr.child(prop.name), prop.shape, child)

        if shape.type_.overlaps(JsonType.ARRAY):
            for i, item in enumerate(shape.tuple_items):
                child = _child_exists(exists, shape.type_, JsonType.ARRAY, i < shape.min_items)
                yield from self._walk(ptr.child(i), item, child)
            if shape.additional_items is not None:
                yield from self._walk(ptr.child(NEXT_INDEX), shape.additional_items, Exists.MAY)

    def locations(self) -> Iterator[tuple[Pointer, JsonType, bool]]:
        for ptr, shape, exists in self.walk():
            yield ptr, shape.type_, exists is Exists.MUST

    def locate_shape(self, pointer: Pointer) -> tuple[Shape, Exists] | None:
        """Return the shape and existence of *pointer*, or None if the schema doesn't reach it."""
        shape, exists = self.root, Exists.MUST

        for token in pointer:
            is_object = shape.type_.overlaps(JsonType.OBJECT)
            is_array = shape.type_.overlaps(JsonType.ARRAY)

            if isinstance(token, int) and is_array:
                if token < len(shape.tuple_items):
                    required = token < shape.min_items
                    shape, exists = shape.tuple_items[token], _child_exists(exists, shape.type_, JsonType.ARRAY, required)
                    continue
                if shape.additional_items is not None:
                    shape, exists = shape.additional_items, Exists.MAY
                    continue
            if token is NEXT_INDEX:
                if is_array and shape.additional_items is not None:
                    shape, exists = shape.additional_items, Exists.MAY
                    continue
                return None
            if is_object:
                # an index token may still name an object property such as "2024"
                prop = shape.get_property(str(token))
                if prop is not None:
                    shape, exists = prop.shape, _child_exists(exists, shape.type_, JsonType.OBJECT, prop.required)
                    continue
                if shape.additional_properties is not None:
                    shape, exists = shape.additional_properties, Exists.MAY
                    continue
            return None

        return shape, exists

    def locate(self, pointer: Pointer) -> tuple[JsonType, bool] | None:
        found = self.locate_shape(pointer)
        if found is None:
            return None
        shape, exists = found
        return shape.type_, exists is Exists.MUST

"""tabproj: map tabular column headers onto locations in nested JSON documents."""

from tabproj.collate import collate
from tabproj.config import ParseConfig, load_config
from tabproj.errors import ProjectionError, SchemaBuildError, SchemaIndexError
from tabproj.inference import (
    Exists,
    InferredShape,
    SchemaInferrer,
    Shape,
    ShapeInferrer,
    ShapeModel,
)
from tabproj.jsontypes import JsonType
from tabproj.pointer import NEXT_INDEX, Pointer
from tabproj.projection import (
    ProjectionTable,
    TypeInfo,
    apply_overrides,
    build_projections,
    derive_field_names,
    lookup,
    schema_projections,
    table_to_json,
)
from tabproj.schema import SchemaIndex, build_schema, index_schema

__all__ = [
    # Collation
    "collate",
    # Configuration
    "ParseConfig",
    "load_config",
    # Errors
    "ProjectionError",
    "SchemaBuildError",
    "SchemaIndexError",
    # Locations and types
    "JsonType",
    "NEXT_INDEX",
    "Pointer",
    # Schema handling
    "SchemaIndex",
    "build_schema",
    "index_schema",
    # Shape inference
    "Exists",
    "InferredShape",
    "SchemaInferrer",
    "Shape",
    "ShapeInferrer",
    "ShapeModel",
    # Projections
    "ProjectionTable",
    "TypeInfo",
    "apply_overrides",
    "build_projections",
    "derive_field_names",
    "lookup",
    "schema_projections",
    "table_to_json",
]

"""Parse configuration: the target schema and explicit field projections."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tabproj.pointer import Pointer


class ParseConfig(BaseModel):
    """Configuration consumed when building a projection table.

    Parser configuration files carry many more keys (delimiters, encodings,
    compression); those are ignored here.

    Attributes:
        projections: Ordered mapping of field name to JSON pointer.  These
            always win over names derived from the schema.
        json_schema: JSON Schema of the output documents (``"schema"`` in the
            file).  ``None`` means no type constraints are known.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    projections: dict[str, str] = Field(default_factory=dict)
    json_schema: Any = Field(default=None, alias="schema")

    @field_validator("projections")
    @classmethod
    def _check_pointers(cls, value: dict[str, str]) -> dict[str, str]:
        for field_name, pointer in value.items():
            try:
                Pointer.from_str(pointer)
            except ValueError as err:
                raise ValueError(f"projection {field_name!r}: {err}") from err
        return value


def load_config(path: str | Path) -> ParseConfig:
    """Load a :class:`ParseConfig` from a JSON file.

    Raises:
        pydantic.ValidationError: If the file content is not a valid config.
    """
    return ParseConfig.model_validate_json(Path(path).read_text(encoding="utf-8"))

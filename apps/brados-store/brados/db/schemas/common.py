"""Shared schema building blocks."""
from typing import Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel

# Document numbers are JSON numbers: ints stay ints, floats stay floats, bools are rejected.
Number = Union[StrictInt, StrictFloat]


class DocumentModel(BaseModel):
    """Models whose stored keys equal their attribute names."""

    model_config = ConfigDict(from_attributes=True)


class CamelDocumentModel(BaseModel):
    """Models stored with camelCase keys and exposed with snake_case attributes."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

"""Shared pydantic base for planner documents."""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model that reads and writes the document store's camelCase keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

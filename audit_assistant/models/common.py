"""
Common response models and utilities.

Camel-case base model shared by every API schema and the delete response.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized in camelCase for the browser client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeleteResponse(CamelModel):
    """Response for idempotent delete operations."""

    success: bool = True

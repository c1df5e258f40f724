"""
Shared Pydantic configuration for API schemas.
"""
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Schemas read straight from ORM rows and planner results; enums serialize as values."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
    )

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


T = TypeVar('T')


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; unknown request fields are dropped"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra='ignore',
    )


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T

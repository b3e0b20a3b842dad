from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Numbers that end up in INTEGER columns; larger values are rejected as a
# validation error before they reach the driver.
Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]


class CamelModel(BaseModel):
    """
    Base for every wire DTO.

    JSON uses camelCase keys (`publishedYear`); Python code uses snake_case
    attributes (`published_year`). Both spellings are accepted on input.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

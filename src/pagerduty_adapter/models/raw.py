"""Raw record representation before schema-guided conversion."""

from pydantic import BaseModel, ConfigDict, Field, JsonValue


class RawRecord(BaseModel):
    """
    One item of a datasource collection, decoded as typed JSON.
    Values are str | int | float | bool | None | nested dict | list.
    """

    model_config = ConfigDict(frozen=True)

    data: dict[str, JsonValue] = Field(default_factory=dict)

"""Entity and attribute schema requested by the ingestion host."""

from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field


class AttributeType(str, Enum):
    """Attribute value types supported by the ingestion service."""

    BOOL = "bool"
    DATETIME = "datetime"
    DOUBLE = "double"
    DURATION = "duration"
    INT64 = "int64"
    STRING = "string"


class AttributeSpec(BaseModel):
    """One requested attribute. external_id is a key or a JSONPath ($.a.b)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    external_id: str
    type: AttributeType = AttributeType.STRING
    is_list: bool = Field(default=False, alias="list")


class EntitySpec(BaseModel):
    """Requested entity: external ID, ordered attributes and (unsupported) child entities."""

    model_config = ConfigDict(frozen=True)

    external_id: str
    attributes: tuple[AttributeSpec, ...] = Field(default_factory=tuple)
    child_entities: tuple["EntitySpec", ...] = Field(default_factory=tuple)

    def has_attribute(self, external_id: str) -> bool:
        return any(a.external_id == external_id for a in self.attributes)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "EntitySpec":
        """
        Load an entity spec from YAML. Attributes may be given as mappings
        ({external_id, type, list}) or as bare external IDs (string type).
        """
        data = yaml.safe_load(Path(path).read_text()) or {}
        attributes = []
        for item in data.get("attributes") or []:
            if isinstance(item, str):
                attributes.append({"external_id": item})
            else:
                attributes.append(item)
        return cls.model_validate(
            {
                "external_id": data.get("external_id") or data.get("entity", ""),
                "attributes": attributes,
                "child_entities": data.get("child_entities") or [],
            }
        )

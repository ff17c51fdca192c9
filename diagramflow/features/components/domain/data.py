"""
Data component payload

Represents data or a data store, described by a type and an ordered list
of typed fields. Field names need not be unique.
"""
from dataclasses import dataclass
from typing import Tuple

from diagramflow.features.components.domain.component_kind import ComponentKind, require_kind
from diagramflow.shared.application.validation import ValidationResult

DEFAULT_DATA_TYPE = "generic"
DATA_PALETTE = {"fill_color": "#9b59b6", "stroke_color": "#7d3c98"}


@dataclass(frozen=True)
class DataField:
    name: str
    type: str

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type}

    @classmethod
    def from_value(cls, value) -> 'DataField':
        """Build from a DataField, a {"name", "type"} mapping or a (name, type) pair."""
        if isinstance(value, DataField):
            return value
        if isinstance(value, dict):
            return cls(name=value["name"], type=value["type"])
        name, field_type = value
        return cls(name=name, type=field_type)


@dataclass(frozen=True)
class DataPayload:
    data_type: str = DEFAULT_DATA_TYPE
    fields: Tuple[DataField, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(DataField.from_value(f) for f in self.fields))

    def to_dict(self) -> dict:
        return {
            "data_type": self.data_type,
            "fields": [f.to_dict() for f in self.fields],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DataPayload':
        return cls(
            data_type=data.get("data_type", DEFAULT_DATA_TYPE),
            fields=data.get("fields") or (),
        )


def validate_data(component) -> ValidationResult:
    return ValidationResult.success()


def set_data_type(component, data_type: str):
    require_kind(component, ComponentKind.DATA)
    return component.update_payload(data_type=data_type)


def add_field(component, name: str, field_type: str):
    require_kind(component, ComponentKind.DATA)
    return component.update_payload(fields=component.payload.fields + (DataField(name, field_type),))


def remove_field(component, name: str):
    """Remove every field with the given name."""
    require_kind(component, ComponentKind.DATA)
    return component.update_payload(fields=tuple(f for f in component.payload.fields if f.name != name))

"""
Custom component payload

For use cases the other kinds do not cover: a free-form property bag.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict

from diagramflow.features.components.domain.component_kind import ComponentKind, require_kind
from diagramflow.shared.application.validation import ValidationResult


@dataclass(frozen=True)
class CustomPayload:
    custom_properties: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"custom_properties": copy.deepcopy(self.custom_properties)}

    @classmethod
    def from_dict(cls, data: dict) -> 'CustomPayload':
        properties = data.get("custom_properties") or {}
        if not isinstance(properties, dict):
            raise TypeError(f"custom_properties must be a mapping, got {type(properties).__name__}")
        return cls(custom_properties=copy.deepcopy(properties))


def validate_custom(component) -> ValidationResult:
    return ValidationResult.success()


def set_custom_property(component, key: str, value: Any):
    require_kind(component, ComponentKind.CUSTOM)
    properties = copy.deepcopy(component.payload.custom_properties)
    properties[key] = value
    return component.update_payload(custom_properties=properties)


def get_custom_property(component, key: str, default: Any = None) -> Any:
    require_kind(component, ComponentKind.CUSTOM)
    return copy.deepcopy(component.payload.custom_properties.get(key, default))

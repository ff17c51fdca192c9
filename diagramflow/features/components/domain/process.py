"""
Process component payload

Represents an action or processing step.
"""
from dataclasses import dataclass

from diagramflow.features.components.domain.component_kind import ComponentKind, require_kind
from diagramflow.shared.application.validation import RequiredValidator, ValidationResult, validate_field

DEFAULT_PROCESS_NAME = "New process"


@dataclass(frozen=True)
class ProcessPayload:
    process_name: str = DEFAULT_PROCESS_NAME
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "process_name": self.process_name,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ProcessPayload':
        return cls(
            process_name=data.get("process_name", DEFAULT_PROCESS_NAME),
            description=data.get("description", ""),
        )


def validate_process(component) -> ValidationResult:
    return validate_field("process_name", component.payload.process_name, RequiredValidator())


def set_process_name(component, name: str):
    require_kind(component, ComponentKind.PROCESS)
    return component.update_payload(process_name=name)


def set_description(component, description: str):
    require_kind(component, ComponentKind.PROCESS)
    return component.update_payload(description=description)

"""
Decision component payload

Represents a branch point: a question and the ordered list of conditions
leaving it.
"""
from dataclasses import dataclass
from typing import Tuple

from diagramflow.features.components.domain.component_kind import ComponentKind, require_kind
from diagramflow.shared.application.validation import (
    CustomValidator,
    RequiredValidator,
    ValidationResult,
    validate_field,
)

DEFAULT_QUESTION = "Condition?"
DEFAULT_CONDITIONS = ("Yes", "No")
DECISION_PALETTE = {"fill_color": "#f39c12", "stroke_color": "#d68910"}


@dataclass(frozen=True)
class DecisionPayload:
    question: str = DEFAULT_QUESTION
    conditions: Tuple[str, ...] = DEFAULT_CONDITIONS

    def __post_init__(self):
        if self.conditions is not None:
            object.__setattr__(self, "conditions", tuple(self.conditions))

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "conditions": list(self.conditions) if self.conditions is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DecisionPayload':
        return cls(
            question=data.get("question", DEFAULT_QUESTION),
            conditions=data.get("conditions", DEFAULT_CONDITIONS),
        )


def validate_decision(component) -> ValidationResult:
    payload = component.payload
    result = ValidationResult()
    result.merge(validate_field("question", payload.question, RequiredValidator()))
    result.merge(validate_field("conditions", payload.conditions, [
        RequiredValidator("must contain at least one condition"),
        CustomValidator(
            lambda conditions: all(isinstance(c, str) and c.strip() for c in conditions),
            "each condition must be non-empty text",
        ),
    ]))
    return result


def set_question(component, question: str):
    require_kind(component, ComponentKind.DECISION)
    return component.update_payload(question=question)


def add_condition(component, condition: str):
    require_kind(component, ComponentKind.DECISION)
    return component.update_payload(conditions=component.payload.conditions + (condition,))


def remove_condition(component, condition: str):
    """Remove every occurrence of a condition."""
    require_kind(component, ComponentKind.DECISION)
    remaining = tuple(c for c in component.payload.conditions if c != condition)
    return component.update_payload(conditions=remaining)

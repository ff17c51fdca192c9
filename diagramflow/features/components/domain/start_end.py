"""
Start/End component payload

Represents the beginning or the end of a flow. The label and palette follow
is_start: flipping it swaps colors, and swaps the label while it is still
one of the default labels.
"""
from dataclasses import dataclass, replace

from diagramflow.features.components.domain.component_kind import ComponentKind, require_kind
from diagramflow.shared.application.validation import ValidationResult

START_LABEL = "Start"
END_LABEL = "End"
START_PALETTE = {"fill_color": "#27ae60", "stroke_color": "#1e8449"}
END_PALETTE = {"fill_color": "#e74c3c", "stroke_color": "#c0392b"}


@dataclass(frozen=True)
class StartEndPayload:
    is_start: bool = True

    def to_dict(self) -> dict:
        return {"is_start": self.is_start}

    @classmethod
    def from_dict(cls, data: dict) -> 'StartEndPayload':
        is_start = data.get("is_start", True)
        if not isinstance(is_start, bool):
            raise TypeError(f"is_start must be true or false, got {is_start!r}")
        return cls(is_start=is_start)


def default_label(is_start: bool) -> str:
    return START_LABEL if is_start else END_LABEL


def palette(is_start: bool) -> dict:
    return dict(START_PALETTE if is_start else END_PALETTE)


def validate_start_end(component) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(component.payload.is_start, bool):
        result.add_error("is_start: must be true or false")
    return result


def set_is_start(component, is_start: bool):
    require_kind(component, ComponentKind.START_END)
    if not isinstance(is_start, bool):
        raise TypeError(f"is_start must be true or false, got {is_start!r}")

    content = component.content
    if not content.text or content.text in (START_LABEL, END_LABEL):
        content = replace(content, text=default_label(is_start))

    return component.assign(
        payload=replace(component.payload, is_start=is_start),
        style=replace(component.style, **palette(is_start)),
        content=content,
    )

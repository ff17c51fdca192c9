"""
Connector component payload

A connector is a directed edge between two components, modeled as a
component kind of its own so it shares identity, contexts and
(de)serialization with every other shape.

Invariants (checked by validate_connector_payload):
- from_id and to_id are non-empty
- from_id != to_id (no self loop)
- label_position, when set, lies in [0, 1]

direction, line_style, caps and control points only drive rendering.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from diagramflow.features.components.domain.component_kind import ComponentKind, TaggedEnum, require_kind
from diagramflow.shared.application.validation import (
    RangeValidator,
    RequiredValidator,
    ValidationResult,
    validate_field,
)

DEFAULT_LABEL_POSITION = 0.5
CONNECTOR_STYLE = {"fill_color": "none", "stroke_color": "#2c5aa0"}


class ArrowDirection(TaggedEnum):
    RIGHT = "right"
    LEFT = "left"
    DOWN = "down"
    UP = "up"
    DIAGONAL_DR = "diagonal-dr"  # down-right
    DIAGONAL_DL = "diagonal-dl"  # down-left
    DIAGONAL_UR = "diagonal-ur"  # up-right
    DIAGONAL_UL = "diagonal-ul"  # up-left


class LineStyle(TaggedEnum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"
    DOUBLE = "double"


class CapType(TaggedEnum):
    """Terminator glyph drawn at one end of a connector."""
    ARROW = "arrow"
    TRIANGLE = "triangle"
    CIRCLE = "circle"
    DIAMOND = "diamond"
    NONE = "none"


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_value(cls, value) -> 'Point':
        """Build from a Point, a {"x", "y"} mapping or an (x, y) pair."""
        if isinstance(value, Point):
            return value
        if isinstance(value, dict):
            return cls(x=value["x"], y=value["y"])
        x, y = value
        return cls(x=x, y=y)


@dataclass(frozen=True)
class ConnectorPayload:
    from_id: str = ""
    to_id: str = ""
    direction: ArrowDirection = ArrowDirection.RIGHT
    line_style: LineStyle = LineStyle.SOLID
    start_cap: CapType = CapType.NONE
    end_cap: CapType = CapType.ARROW
    control_points: Tuple[Point, ...] = ()
    label: Optional[str] = None
    label_position: Optional[float] = DEFAULT_LABEL_POSITION
    bidirectional: bool = False

    def __post_init__(self):
        object.__setattr__(self, "direction", ArrowDirection.from_string(self.direction))
        object.__setattr__(self, "line_style", LineStyle.from_string(self.line_style))
        object.__setattr__(self, "start_cap", CapType.from_string(self.start_cap))
        object.__setattr__(self, "end_cap", CapType.from_string(self.end_cap))
        object.__setattr__(self, "control_points", tuple(Point.from_value(p) for p in self.control_points))

    def to_dict(self) -> dict:
        return {
            "from_id": self.from_id,
            "to_id": self.to_id,
            "direction": self.direction.value,
            "line_style": self.line_style.value,
            "start_cap": self.start_cap.value,
            "end_cap": self.end_cap.value,
            "control_points": [p.to_dict() for p in self.control_points],
            "label": self.label,
            "label_position": self.label_position,
            "bidirectional": self.bidirectional,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ConnectorPayload':
        bidirectional = data.get("bidirectional", False)
        if not isinstance(bidirectional, bool):
            raise TypeError(f"bidirectional must be true or false, got {bidirectional!r}")
        return cls(
            from_id=data.get("from_id", ""),
            to_id=data.get("to_id", ""),
            direction=data.get("direction", ArrowDirection.RIGHT),
            line_style=data.get("line_style", LineStyle.SOLID),
            start_cap=data.get("start_cap", CapType.NONE),
            end_cap=data.get("end_cap", CapType.ARROW),
            control_points=data.get("control_points") or (),
            label=data.get("label"),
            label_position=data.get("label_position", DEFAULT_LABEL_POSITION),
            bidirectional=bidirectional,
        )


def validate_connector_payload(component) -> ValidationResult:
    payload = component.payload
    result = ValidationResult()
    result.merge(validate_field("from_id", payload.from_id, RequiredValidator("source component is required")))
    result.merge(validate_field("to_id", payload.to_id, RequiredValidator("target component is required")))
    if payload.from_id and payload.from_id == payload.to_id:
        result.add_error("a connector cannot connect a component to itself")
    result.merge(validate_field("label_position", payload.label_position, RangeValidator(0, 1)))
    return result


# =============================================================================
# Setters
# =============================================================================

def set_endpoints(component, from_id: Optional[str] = None, to_id: Optional[str] = None):
    require_kind(component, ComponentKind.CONNECTOR)
    changes = {}
    if from_id is not None:
        changes["from_id"] = from_id
    if to_id is not None:
        changes["to_id"] = to_id
    return component.update_payload(**changes)


def set_direction(component, direction):
    require_kind(component, ComponentKind.CONNECTOR)
    return component.update_payload(direction=ArrowDirection.from_string(direction))


def set_line_style(component, line_style):
    require_kind(component, ComponentKind.CONNECTOR)
    return component.update_payload(line_style=LineStyle.from_string(line_style))


def set_caps(component, start=None, end=None):
    """Set the terminator at either end; None leaves that end unchanged."""
    require_kind(component, ComponentKind.CONNECTOR)
    changes = {}
    if start is not None:
        changes["start_cap"] = CapType.from_string(start)
    if end is not None:
        changes["end_cap"] = CapType.from_string(end)
    return component.update_payload(**changes)


def set_control_points(component, points: Sequence):
    require_kind(component, ComponentKind.CONNECTOR)
    return component.update_payload(control_points=tuple(Point.from_value(p) for p in points))


def set_label(component, label: Optional[str], position: Optional[float] = None):
    require_kind(component, ComponentKind.CONNECTOR)
    changes = {"label": label}
    if position is not None:
        changes["label_position"] = position
    return component.update_payload(**changes)


def set_bidirectional(component, bidirectional: bool):
    require_kind(component, ComponentKind.CONNECTOR)
    return component.update_payload(bidirectional=bool(bidirectional))


# =============================================================================
# Geometry helpers
# =============================================================================

def calculate_auto_direction(source, target) -> ArrowDirection:
    """
    Pick the compass direction from source to target.

    Uses the angle between the two bounding-box centres in screen coordinates
    (y grows downwards), split into eight 45 degree sectors.
    """
    source_x, source_y = source.position.center
    target_x, target_y = target.position.center
    angle = math.degrees(math.atan2(target_y - source_y, target_x - source_x))

    if -22.5 <= angle < 22.5:
        return ArrowDirection.RIGHT
    if 22.5 <= angle < 67.5:
        return ArrowDirection.DIAGONAL_DR
    if 67.5 <= angle < 112.5:
        return ArrowDirection.DOWN
    if 112.5 <= angle < 157.5:
        return ArrowDirection.DIAGONAL_DL
    if angle >= 157.5 or angle < -157.5:
        return ArrowDirection.LEFT
    if -157.5 <= angle < -112.5:
        return ArrowDirection.DIAGONAL_UL
    if -112.5 <= angle < -67.5:
        return ArrowDirection.UP
    return ArrowDirection.DIAGONAL_UR

"""
Component kind value objects

Discriminator and presentation enums shared by every component kind.
"""
from enum import Enum


class TaggedEnum(Enum):
    """
    Enum whose values are the string tags used in serialized records.

    from_string() accepts the tag itself or the member name, case-insensitive,
    with '_' and '-' treated alike ("START_END", "start_end", "start-end").
    """

    @classmethod
    def from_string(cls, value) -> 'TaggedEnum':
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            for member in cls:
                if member.value == normalized or member.name.lower().replace("_", "-") == normalized:
                    return member
        raise ValueError(f"Invalid {cls.__name__}: {value!r}")


class ComponentKind(TaggedEnum):
    """
    Component discriminator.

    - PROCESS: an action or processing step
    - DECISION: a branch point with conditions
    - START_END: beginning or end of a flow
    - DATA: data or a data store
    - CUSTOM: free-form component
    - CONNECTOR: directed edge between two components
    """
    PROCESS = "process"
    DECISION = "decision"
    START_END = "start-end"
    DATA = "data"
    CUSTOM = "custom"
    CONNECTOR = "connector"


class ShapeType(TaggedEnum):
    """Rendering hint; inert to validation."""
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    DIAMOND = "diamond"
    CIRCLE = "circle"
    ROUNDED_RECTANGLE = "rounded-rectangle"


class BorderStyle(TaggedEnum):
    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"
    DASHED = "dashed"
    DOTTED = "dotted"


class TextAlign(TaggedEnum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def require_kind(component, kind: ComponentKind) -> None:
    """
    Guard for kind-specific setters.

    Raises:
        TypeError: If the component is not of the expected kind
    """
    if component.kind is not kind:
        raise TypeError(
            f"Component '{component.id}' is a {component.kind.value} component, "
            f"not {kind.value}"
        )

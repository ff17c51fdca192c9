"""
Component property value objects

Position, style and content are immutable values: mutators on Component
swap in a patched copy, so handing one to a caller never exposes live state.
"""
from dataclasses import dataclass, asdict
from typing import Optional

from diagramflow.features.components.domain.component_kind import BorderStyle, TextAlign


@dataclass(frozen=True)
class Position:
    """
    Bounding box of a component.

    Invariant (checked by Component.check): width > 0 and height > 0.
    """
    x: float = 100.0
    y: float = 100.0
    width: float = 160.0
    height: float = 80.0
    rotation: float = 0.0  # degrees

    @property
    def center(self) -> tuple:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Position':
        return cls(**data)


@dataclass(frozen=True)
class Style:
    """Presentation only."""
    fill_color: str = "#4a90e2"
    stroke_color: str = "#2c5aa0"
    stroke_width: float = 2
    border_style: BorderStyle = BorderStyle.SINGLE
    opacity: float = 1.0
    shadow: bool = False

    def __post_init__(self):
        # Accept serialized tags
        object.__setattr__(self, "border_style", BorderStyle.from_string(self.border_style))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["border_style"] = self.border_style.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Style':
        return cls(**data)


@dataclass(frozen=True)
class Content:
    """Display text, optional LaTeX equation and font settings. Presentation only."""
    text: str = ""
    equation: Optional[str] = None
    font_size: float = 14
    font_family: str = "Arial, sans-serif"
    text_color: str = "#000000"
    text_align: TextAlign = TextAlign.CENTER

    def __post_init__(self):
        object.__setattr__(self, "text_align", TextAlign.from_string(self.text_align))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["text_align"] = self.text_align.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Content':
        return cls(**data)

    def matches(self, search: str) -> bool:
        """Case-insensitive substring match over text and equation."""
        needle = search.lower()
        return any(
            value and needle in value.lower()
            for value in (self.text, self.equation)
        )

"""
Component entity

A typed diagram shape: a common envelope (identity, geometry, style, content,
context memberships, extension bag, timestamps) plus a kind-specific payload.
The payload is a tagged union discriminated by `kind`; per-kind behavior is
looked up in the kind table rather than through subclassing.

Mutators patch one nested value at a time. A patch with an unknown field name
raises before anything changes, so a mutator either applies fully or not at
all. Every effective mutation advances updated_at.
"""
import copy
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, FrozenSet, Mapping, Optional

from diagramflow.features.components.domain.component_kind import ComponentKind, ShapeType
from diagramflow.features.components.domain.kind_table import get_kind_spec
from diagramflow.features.components.domain.properties import Content, Position, Style
from diagramflow.shared.application.validation import (
    CustomValidator,
    RangeValidator,
    RequiredValidator,
    ValidationResult,
    validate_field,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _is_text(value) -> bool:
    return isinstance(value, str)


def _merge_patch(patch: Optional[Mapping], changes: dict) -> dict:
    merged = dict(patch or {})
    merged.update(changes)
    return merged


@dataclass
class Component:
    """
    Component entity - any diagram shape, connectors included.

    Attributes:
        id: Opaque unique identifier, generated when None
        kind: Discriminator selecting the payload variant
        shape: Rendering hint
        position: Bounding box (immutable value)
        style: Presentation (immutable value)
        content: Display text/equation/font (immutable value)
        payload: Kind-specific data (immutable value)
        contexts: Contexts (wizard steps) the component participates in
        extensions: Open bag for caller-defined data
        created_at / updated_at: UTC timestamps, generated when None
    """
    id: Optional[str]
    kind: ComponentKind
    shape: ShapeType
    position: Position
    style: Style
    content: Content
    payload: Any
    contexts: FrozenSet[str] = frozenset()
    extensions: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.id is None:
            self.id = str(uuid.uuid4())
        now = utc_now()
        if self.created_at is None:
            self.created_at = now
        if self.updated_at is None:
            self.updated_at = self.created_at
        self.contexts = frozenset(self.contexts)

    # ========== Mutators ==========

    def update_position(self, patch: Optional[Mapping] = None, **changes) -> 'Component':
        self.position = replace(self.position, **_merge_patch(patch, changes))
        self._touch()
        return self

    def update_style(self, patch: Optional[Mapping] = None, **changes) -> 'Component':
        self.style = replace(self.style, **_merge_patch(patch, changes))
        self._touch()
        return self

    def update_content(self, patch: Optional[Mapping] = None, **changes) -> 'Component':
        self.content = replace(self.content, **_merge_patch(patch, changes))
        self._touch()
        return self

    def update_payload(self, patch: Optional[Mapping] = None, **changes) -> 'Component':
        """Merge-patch the kind payload. Kind modules wrap this in named setters."""
        self.payload = replace(self.payload, **_merge_patch(patch, changes))
        self._touch()
        return self

    def assign(self, **values) -> 'Component':
        """
        Replace several nested values in one step.

        Accepts shape, position, style, content and payload. Used by setters
        whose effect spans more than one value (e.g. flipping start/end also
        recolors the shape).
        """
        allowed = {"shape", "position", "style", "content", "payload"}
        unknown = set(values) - allowed
        if unknown:
            raise TypeError(f"Cannot assign {sorted(unknown)} on a component")
        for name, value in values.items():
            setattr(self, name, value)
        self._touch()
        return self

    def add_to_context(self, context_id: str) -> 'Component':
        if context_id not in self.contexts:
            self.contexts = self.contexts | {context_id}
            self._touch()
        return self

    def remove_from_context(self, context_id: str) -> 'Component':
        if context_id in self.contexts:
            self.contexts = self.contexts - {context_id}
            self._touch()
        return self

    def in_context(self, context_id: str) -> bool:
        return context_id in self.contexts

    def set_extension(self, key: str, value: Any) -> 'Component':
        self.extensions = {**self.extensions, key: copy.deepcopy(value)}
        self._touch()
        return self

    def remove_extension(self, key: str) -> 'Component':
        if key in self.extensions:
            self.extensions = {k: v for k, v in self.extensions.items() if k != key}
            self._touch()
        return self

    def extensions_snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy(self.extensions)

    def _touch(self) -> None:
        # Strictly increasing even when the clock has not moved
        now = utc_now()
        if self.updated_at is not None and now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now

    # ========== Validation ==========

    def check(self) -> ValidationResult:
        """
        Collect every violated invariant: the base envelope rules followed by
        the kind's own rules.
        """
        result = ValidationResult()
        result.merge(validate_field("id", self.id, RequiredValidator()))
        result.merge(validate_field("kind", self.kind, [
            RequiredValidator(),
            CustomValidator(lambda kind: isinstance(kind, ComponentKind), "must be a component kind"),
        ]))
        result.merge(validate_field("shape", self.shape, [
            RequiredValidator(),
            CustomValidator(lambda shape: isinstance(shape, ShapeType), "must be a shape type"),
        ]))
        for name in ("x", "y", "rotation"):
            result.merge(validate_field(f"position.{name}", getattr(self.position, name),
                                        [RequiredValidator(), RangeValidator()]))
        result.merge(validate_field("position.width", self.position.width,
                                    [RequiredValidator(), RangeValidator(min_value=0, min_exclusive=True)]))
        result.merge(validate_field("position.height", self.position.height,
                                    [RequiredValidator(), RangeValidator(min_value=0, min_exclusive=True)]))
        result.merge(validate_field("content.text", self.content.text,
                                    CustomValidator(_is_text, "must be text")))
        result.merge(validate_field("content.equation", self.content.equation,
                                    CustomValidator(_is_text, "must be text")))
        result.merge(validate_field("contexts", self.contexts, CustomValidator(
            lambda contexts: all(_is_text(c) and c.strip() for c in contexts),
            "each context must be non-empty text",
        )))

        if isinstance(self.kind, ComponentKind):
            spec = get_kind_spec(self.kind)
            if not isinstance(self.payload, spec.payload_type):
                result.add_error(
                    f"payload: expected {spec.payload_type.__name__} for {self.kind.value}, "
                    f"got {type(self.payload).__name__}"
                )
            else:
                result.merge(spec.validator(self))
        return result

    def validate(self) -> bool:
        return self.check().valid

    # ========== Copies ==========

    def copy(self) -> 'Component':
        """Deep snapshot with the same identity."""
        return copy.deepcopy(self)

    def clone(self) -> 'Component':
        """Independent duplicate with a fresh identity and fresh timestamps."""
        now = utc_now()
        duplicate = copy.deepcopy(self)
        duplicate.id = str(uuid.uuid4())
        duplicate.created_at = now
        duplicate.updated_at = now
        return duplicate

    # ========== Serialization ==========

    def to_dict(self) -> dict:
        """
        Convert to a flat record for serialization.

        Payload fields sit at the top level next to the envelope; the `kind`
        tag says which ones to expect. Timestamps are ISO-8601 strings.
        """
        data = {
            "id": self.id,
            "kind": self.kind.value,
            "shape": self.shape.value,
            "position": self.position.to_dict(),
            "style": self.style.to_dict(),
            "content": self.content.to_dict(),
            "contexts": sorted(self.contexts),
            "extensions": copy.deepcopy(self.extensions),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
        data.update(self.payload.to_dict())
        return data

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"

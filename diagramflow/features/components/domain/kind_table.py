"""
Kind dispatch table

Maps every ComponentKind to the pieces that differ per kind: payload type,
default shape, default style and content (which may depend on the payload),
and the kind's own validator. The factory and Component.check() dispatch
through this table only, so adding a kind means adding one entry here.
"""
from dataclasses import dataclass
from typing import Callable, Type

from diagramflow.features.components.domain import connector, custom, data, decision, process, start_end
from diagramflow.features.components.domain.component_kind import BorderStyle, ComponentKind, ShapeType
from diagramflow.shared.application.registry import KeyedRegistry
from diagramflow.shared.application.validation import ValidationResult


def _no_overrides(payload) -> dict:
    return {}


@dataclass(frozen=True)
class KindSpec:
    """
    Per-kind construction and validation hooks.

    Attributes:
        kind: The discriminator this entry serves
        payload_type: Payload dataclass (must offer from_dict/to_dict)
        default_shape: Shape used when the caller gives none
        style_defaults: payload -> Style field overrides applied over base defaults
        content_defaults: payload -> Content field overrides applied over base defaults
        validator: component -> ValidationResult for kind-specific invariants
    """
    kind: ComponentKind
    payload_type: Type
    default_shape: ShapeType
    validator: Callable[..., ValidationResult]
    style_defaults: Callable[..., dict] = _no_overrides
    content_defaults: Callable[..., dict] = _no_overrides

    def build_payload(self, fields: dict):
        return self.payload_type.from_dict(fields)


def _start_end_style(payload) -> dict:
    return {**start_end.palette(payload.is_start), "border_style": BorderStyle.DOUBLE}


def _start_end_content(payload) -> dict:
    return {"text": start_end.default_label(payload.is_start)}


KIND_TABLE: KeyedRegistry[KindSpec] = KeyedRegistry("ComponentKind")

KIND_TABLE.register(
    ComponentKind.PROCESS,
    KindSpec(
        kind=ComponentKind.PROCESS,
        payload_type=process.ProcessPayload,
        default_shape=ShapeType.RECTANGLE,
        validator=process.validate_process,
    ),
    description="Action or processing step",
    tags=["node"],
)
KIND_TABLE.register(
    ComponentKind.DECISION,
    KindSpec(
        kind=ComponentKind.DECISION,
        payload_type=decision.DecisionPayload,
        default_shape=ShapeType.DIAMOND,
        validator=decision.validate_decision,
        style_defaults=lambda payload: dict(decision.DECISION_PALETTE),
    ),
    description="Branch point with conditions",
    tags=["node"],
)
KIND_TABLE.register(
    ComponentKind.START_END,
    KindSpec(
        kind=ComponentKind.START_END,
        payload_type=start_end.StartEndPayload,
        default_shape=ShapeType.ROUNDED_RECTANGLE,
        validator=start_end.validate_start_end,
        style_defaults=_start_end_style,
        content_defaults=_start_end_content,
    ),
    description="Start or end of a flow",
    tags=["node"],
)
KIND_TABLE.register(
    ComponentKind.DATA,
    KindSpec(
        kind=ComponentKind.DATA,
        payload_type=data.DataPayload,
        default_shape=ShapeType.RECTANGLE,
        validator=data.validate_data,
        style_defaults=lambda payload: dict(data.DATA_PALETTE),
    ),
    description="Data or data store",
    tags=["node"],
)
KIND_TABLE.register(
    ComponentKind.CUSTOM,
    KindSpec(
        kind=ComponentKind.CUSTOM,
        payload_type=custom.CustomPayload,
        default_shape=ShapeType.RECTANGLE,
        validator=custom.validate_custom,
    ),
    description="Free-form component",
    tags=["node"],
)
KIND_TABLE.register(
    ComponentKind.CONNECTOR,
    KindSpec(
        kind=ComponentKind.CONNECTOR,
        payload_type=connector.ConnectorPayload,
        default_shape=ShapeType.RECTANGLE,
        validator=connector.validate_connector_payload,
        style_defaults=lambda payload: dict(connector.CONNECTOR_STYLE),
    ),
    description="Directed edge between two components",
    tags=["edge"],
)


def get_kind_spec(kind: ComponentKind) -> KindSpec:
    """
    Look up the table entry for a kind.

    Raises:
        KeyError: If the kind has no entry
    """
    spec = KIND_TABLE.get(kind)
    if spec is None:
        raise KeyError(kind)
    return spec


def node_kinds() -> list:
    """Kinds that can be connector endpoints."""
    return [kind for kind, _, _ in KIND_TABLE.get_by_tag("node")]

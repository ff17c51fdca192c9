"""
Domain layer for components feature.

Contains:
- Component entity (common envelope + kind payload)
- ComponentKind, ShapeType and presentation enums
- Position, Style, Content value objects
- Kind payloads and their setters (process, decision, start_end, data, custom, connector)
- KIND_TABLE dispatch table
"""
from diagramflow.features.components.domain.component_kind import (
    ComponentKind,
    ShapeType,
    BorderStyle,
    TextAlign,
)
from diagramflow.features.components.domain.properties import Position, Style, Content
from diagramflow.features.components.domain.process import ProcessPayload
from diagramflow.features.components.domain.decision import DecisionPayload
from diagramflow.features.components.domain.start_end import StartEndPayload
from diagramflow.features.components.domain.data import DataPayload, DataField
from diagramflow.features.components.domain.custom import CustomPayload
from diagramflow.features.components.domain.connector import (
    ConnectorPayload,
    ArrowDirection,
    LineStyle,
    CapType,
    Point,
    calculate_auto_direction,
)
from diagramflow.features.components.domain.kind_table import KIND_TABLE, KindSpec, get_kind_spec, node_kinds
from diagramflow.features.components.domain.component import Component

__all__ = [
    'Component',
    'ComponentKind',
    'ShapeType',
    'BorderStyle',
    'TextAlign',
    'Position',
    'Style',
    'Content',
    'ProcessPayload',
    'DecisionPayload',
    'StartEndPayload',
    'DataPayload',
    'DataField',
    'CustomPayload',
    'ConnectorPayload',
    'ArrowDirection',
    'LineStyle',
    'CapType',
    'Point',
    'calculate_auto_direction',
    'KIND_TABLE',
    'KindSpec',
    'get_kind_spec',
    'node_kinds',
]

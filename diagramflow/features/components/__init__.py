"""
Components feature module.

Usage:
    from diagramflow.features.components.domain import Component, ComponentKind
    from diagramflow.features.components.application import ComponentFactory
    from diagramflow.features.components.infrastructure import ComponentStore
"""
# Only export domain by default - application and infrastructure via submodules
from diagramflow.features.components.domain import (
    Component,
    ComponentKind,
    ShapeType,
)

__all__ = [
    'Component',
    'ComponentKind',
    'ShapeType',
]

"""
Application layer for components feature.

Contains:
- ComponentFactory - builds defaulted, restored and cloned components
"""
from diagramflow.features.components.application.component_factory import ComponentFactory

__all__ = [
    'ComponentFactory',
]

"""
Infrastructure layer for components feature.

Contains:
- ComponentStore - in-memory store with portable (JSON) import/export
- ComponentFilter - composable query criteria
- LoadReport - outcome of a bulk load
"""
from diagramflow.features.components.infrastructure.component_store import (
    ComponentStore,
    ComponentFilter,
    LoadReport,
)

__all__ = [
    'ComponentStore',
    'ComponentFilter',
    'LoadReport',
]

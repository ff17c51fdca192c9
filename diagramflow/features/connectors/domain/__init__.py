"""
Domain layer for connectors feature.

Contains:
- ValidationRule, ForbiddenPair value objects
- ConnectorVerdict, RejectionCode
- AdjacencyIndex and cycle detection
- Preset rules (PERMISSIVE, STRICT_TREE, DAG, SEQUENTIAL)
"""
from diagramflow.features.connectors.domain.validation_rule import (
    ValidationRule,
    ForbiddenPair,
    ConnectorVerdict,
    ConnectorEndpoints,
    RejectionCode,
)
from diagramflow.features.connectors.domain.connector_graph import (
    AdjacencyIndex,
    find_cycle_path,
    would_create_cycle,
)
from diagramflow.features.connectors.domain.preset_rules import (
    PERMISSIVE,
    STRICT_TREE,
    DAG,
    SEQUENTIAL,
    reject_cycles,
    default_step_rules,
    register_default_rules,
)

__all__ = [
    'ValidationRule',
    'ForbiddenPair',
    'ConnectorVerdict',
    'ConnectorEndpoints',
    'RejectionCode',
    'AdjacencyIndex',
    'find_cycle_path',
    'would_create_cycle',
    'PERMISSIVE',
    'STRICT_TREE',
    'DAG',
    'SEQUENTIAL',
    'reject_cycles',
    'default_step_rules',
    'register_default_rules',
]

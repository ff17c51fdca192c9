"""
Application layer for connectors feature.

Contains:
- RuleRegistry - per-context validation rules
- ConnectorRuleEngine - intrinsic and contextual connector validation
- ConnectorService - orchestrates connector operations on a store
- ConnectionSession - source/target selection state machine
"""
from diagramflow.features.connectors.application.rule_registry import RuleRegistry
from diagramflow.features.connectors.application.connector_rule_engine import ConnectorRuleEngine
from diagramflow.features.connectors.application.connector_service import ConnectorService
from diagramflow.features.connectors.application.connection_session import (
    ConnectionSession,
    SessionOutcome,
    SessionState,
)

__all__ = [
    'RuleRegistry',
    'ConnectorRuleEngine',
    'ConnectorService',
    'ConnectionSession',
    'SessionOutcome',
    'SessionState',
]

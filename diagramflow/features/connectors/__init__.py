"""
Connectors feature module.

Usage:
    from diagramflow.features.connectors.domain import ValidationRule, DAG
    from diagramflow.features.connectors.application import RuleRegistry, ConnectorRuleEngine
"""
# Only export domain by default - application via submodule
from diagramflow.features.connectors.domain import (
    ValidationRule,
    ConnectorVerdict,
    RejectionCode,
)

__all__ = [
    'ValidationRule',
    'ConnectorVerdict',
    'RejectionCode',
]

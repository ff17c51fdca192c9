"""
Rule Registry

Per-context store of connector ValidationRules. An explicit object owned by
the hosting application and handed to the rule engine; tests build their
own isolated instances.
"""
from typing import Dict, Optional

from diagramflow.features.connectors.domain.validation_rule import ValidationRule
from diagramflow.shared.application.registry import KeyedRegistry
from diagramflow.utils.message import Log


class RuleRegistry:
    """
    Maps context ids to ValidationRules.

    Registering under an existing context replaces the previous rule.
    """

    def __init__(self, name: str = "ConnectorRules"):
        self._rules: KeyedRegistry[ValidationRule] = KeyedRegistry(name)

    def register_rule(self, context_id: str, rule: ValidationRule) -> None:
        if not context_id:
            raise ValueError("context_id is required to register a rule")
        if not isinstance(rule, ValidationRule):
            raise TypeError(f"Expected a ValidationRule, got {type(rule).__name__}")
        self._rules.register(context_id, rule, description=rule.description, replace=True)
        Log.info(f"RuleRegistry: Registered rule '{rule.name or 'unnamed'}' for context '{context_id}'")

    def get_rule(self, context_id: Optional[str]) -> Optional[ValidationRule]:
        return self._rules.get(context_id)

    def remove_rule(self, context_id: str) -> bool:
        removed = self._rules.unregister(context_id)
        if removed:
            Log.info(f"RuleRegistry: Removed rule for context '{context_id}'")
        return removed

    def has_rule(self, context_id: Optional[str]) -> bool:
        return self._rules.is_registered(context_id)

    def list_rules(self) -> Dict[str, ValidationRule]:
        """Copy of the context id -> rule mapping."""
        return self._rules.as_dict()

    def clear(self) -> None:
        self._rules.clear()

    def __contains__(self, context_id) -> bool:
        return context_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)

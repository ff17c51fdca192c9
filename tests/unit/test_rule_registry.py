"""
Tests for RuleRegistry and ValidationRule.
"""
import pytest

from diagramflow.features.components.domain import ComponentKind
from diagramflow.features.connectors.application.rule_registry import RuleRegistry
from diagramflow.features.connectors.domain.preset_rules import DAG, PERMISSIVE, SEQUENTIAL
from diagramflow.features.connectors.domain.validation_rule import ForbiddenPair, ValidationRule


# =============================================================================
# ValidationRule
# =============================================================================

class TestValidationRule:
    """Tests for rule construction."""

    def test_defaults_do_not_restrict(self):
        """Test an empty rule sets no constraint."""
        rule = ValidationRule()
        assert rule.allowed_from_kinds is None
        assert rule.allowed_to_kinds is None
        assert rule.max_connections_from is None
        assert rule.forbidden_pairs == ()
        assert rule.custom_validator is None

    def test_kinds_are_parsed(self):
        """Test kind tags become frozensets of ComponentKind."""
        rule = ValidationRule(allowed_from_kinds=["process", ComponentKind.DATA])
        assert rule.allowed_from_kinds == frozenset({ComponentKind.PROCESS, ComponentKind.DATA})

    def test_forbidden_pairs_from_tuples(self):
        """Test pairs can be given as tuples of tags."""
        rule = ValidationRule(forbidden_pairs=[("start-end", "start-end")])
        assert rule.forbidden_pairs == (ForbiddenPair(ComponentKind.START_END, ComponentKind.START_END),)
        assert rule.is_forbidden(ComponentKind.START_END, ComponentKind.START_END)
        assert not rule.is_forbidden(ComponentKind.START_END, ComponentKind.PROCESS)

    @pytest.mark.parametrize("limit", [-1, 1.5, True])
    def test_bad_limits(self, limit):
        """Test limits must be non-negative integers."""
        with pytest.raises(ValueError):
            ValidationRule(max_connections_from=limit)

    def test_with_changes(self):
        """Test deriving a rule leaves the original untouched."""
        derived = SEQUENTIAL.with_changes(max_connections_from=2)
        assert derived.max_connections_from == 2
        assert SEQUENTIAL.max_connections_from == 1
        assert derived.max_connections_to == 1

    def test_unknown_kind_raises(self):
        """Test unknown kind tags are rejected."""
        with pytest.raises(ValueError):
            ValidationRule(allowed_to_kinds=["hexagon"])


# =============================================================================
# RuleRegistry
# =============================================================================

class TestRuleRegistry:
    """Tests for RuleRegistry."""

    def test_register_and_get(self):
        """Test rules are looked up by context."""
        registry = RuleRegistry()
        registry.register_rule("step-1", DAG)
        assert registry.get_rule("step-1") is DAG
        assert registry.has_rule("step-1")
        assert "step-1" in registry

    def test_missing_rule(self):
        """Test an unknown context has no rule."""
        registry = RuleRegistry()
        assert registry.get_rule("step-1") is None
        assert registry.get_rule(None) is None
        assert not registry.has_rule("step-1")

    def test_register_overwrites(self):
        """Test registering again replaces the rule."""
        registry = RuleRegistry()
        registry.register_rule("step-1", DAG)
        registry.register_rule("step-1", PERMISSIVE)
        assert registry.get_rule("step-1") is PERMISSIVE
        assert len(registry) == 1

    def test_remove_rule(self):
        """Test remove_rule reports whether a rule existed."""
        registry = RuleRegistry()
        registry.register_rule("step-1", DAG)
        assert registry.remove_rule("step-1") is True
        assert registry.remove_rule("step-1") is False

    def test_list_rules_is_a_copy(self):
        """Test mutating list_rules() output leaves the registry alone."""
        registry = RuleRegistry()
        registry.register_rule("step-1", DAG)
        rules = registry.list_rules()
        rules["step-2"] = PERMISSIVE
        assert rules["step-1"] is DAG
        assert not registry.has_rule("step-2")

    def test_registries_are_isolated(self):
        """Test two registries do not share rules."""
        first = RuleRegistry()
        second = RuleRegistry()
        first.register_rule("step-1", DAG)
        assert not second.has_rule("step-1")

    def test_clear(self):
        """Test clear removes every rule."""
        registry = RuleRegistry()
        registry.register_rule("a", DAG)
        registry.register_rule("b", DAG)
        registry.clear()
        assert registry.list_rules() == {}

    def test_rejects_bad_input(self):
        """Test empty contexts and non-rules are refused."""
        registry = RuleRegistry()
        with pytest.raises(ValueError):
            registry.register_rule("", DAG)
        with pytest.raises(TypeError):
            registry.register_rule("step-1", {"max_connections_to": 1})

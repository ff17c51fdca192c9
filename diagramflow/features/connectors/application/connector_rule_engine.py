"""
Connector Rule Engine

Two-phase validation of a candidate connector:

1. Intrinsic: the connector's own invariants, plus sanity of the resolved
   endpoints (present, matching ids, not connectors themselves).
2. Contextual: the rule registered for the context, checked in a fixed
   order; the custom predicate runs last and only if every structural
   check passed.

The first failing check decides the verdict.
"""
from typing import Iterable, List, Optional, Sequence, Union

from diagramflow.features.components.domain.component import Component
from diagramflow.features.components.domain.component_kind import ComponentKind
from diagramflow.features.connectors.application.rule_registry import RuleRegistry
from diagramflow.features.connectors.domain.validation_rule import (
    ConnectorEndpoints,
    ConnectorVerdict,
    RejectionCode,
    ValidationRule,
)
from diagramflow.shared.domain.errors import ConnectorRejected
from diagramflow.utils.message import Log

Endpoints = Union[ConnectorEndpoints, Sequence[Optional[Component]]]


def _as_endpoints(endpoints: Endpoints, context_id: Optional[str] = None) -> ConnectorEndpoints:
    if isinstance(endpoints, ConnectorEndpoints):
        return ConnectorEndpoints(endpoints.source, endpoints.target, context_id)
    source, target = endpoints
    return ConnectorEndpoints(source, target, context_id)


class ConnectorRuleEngine:
    """
    Validates candidate connectors against intrinsic invariants and the
    rules of a RuleRegistry.
    """

    def __init__(self, registry: Optional[RuleRegistry] = None):
        self._registry = registry if registry is not None else RuleRegistry()

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    # =========================================================================
    # Entry points
    # =========================================================================

    def validate_connector(
        self,
        candidate: Component,
        endpoints: Endpoints,
        existing: Iterable[Component],
        context_id: Optional[str] = None,
    ) -> ConnectorVerdict:
        """
        Validate a candidate connector.

        Args:
            candidate: The connector being proposed (stored or not)
            endpoints: (source, target) components, or ConnectorEndpoints
            existing: Connectors already in the diagram, any context
            context_id: Context to check; None checks every context the
                candidate belongs to and reports the first rejection

        Returns:
            ConnectorVerdict
        """
        endpoints = _as_endpoints(endpoints, context_id)
        verdict = self.validate_intrinsic(candidate, endpoints)
        if not verdict.accepted:
            return self._rejected(candidate, verdict)

        existing = list(existing)
        if context_id is not None:
            contexts = [context_id]
        else:
            contexts = sorted(candidate.contexts)

        for context in contexts:
            verdict = self.validate_in_context(candidate, endpoints, existing, context)
            if not verdict.accepted:
                return self._rejected(candidate, verdict)

        return ConnectorVerdict.accept(context_id)

    def ensure_acceptable(
        self,
        candidate: Component,
        endpoints: Endpoints,
        existing: Iterable[Component],
        context_id: Optional[str] = None,
    ) -> ConnectorVerdict:
        """
        Same as validate_connector() but raises on rejection.

        Raises:
            ConnectorRejected: If the candidate is rejected
        """
        verdict = self.validate_connector(candidate, endpoints, existing, context_id)
        if not verdict.accepted:
            raise ConnectorRejected(verdict)
        return verdict

    # =========================================================================
    # Phases
    # =========================================================================

    def validate_intrinsic(self, candidate: Component, endpoints: Endpoints) -> ConnectorVerdict:
        """Checks that hold regardless of context."""
        if candidate.kind is not ComponentKind.CONNECTOR:
            return ConnectorVerdict.reject(
                RejectionCode.INVALID_CONNECTOR,
                f"{candidate} is not a connector",
            )

        result = candidate.check()
        if not result.valid:
            return ConnectorVerdict.reject(RejectionCode.INVALID_CONNECTOR, "; ".join(result.errors))

        endpoints = _as_endpoints(endpoints)
        payload = candidate.payload
        for role, component, expected_id in (
            ("source", endpoints.source, payload.from_id),
            ("destination", endpoints.target, payload.to_id),
        ):
            if component is None:
                return ConnectorVerdict.reject(
                    RejectionCode.INVALID_ENDPOINT,
                    f"The {role} component '{expected_id}' was not found",
                )
            if component.id != expected_id:
                return ConnectorVerdict.reject(
                    RejectionCode.INVALID_ENDPOINT,
                    f"The {role} component '{component.id}' does not match the connector ({expected_id})",
                )
            if component.kind is ComponentKind.CONNECTOR:
                return ConnectorVerdict.reject(
                    RejectionCode.INVALID_ENDPOINT,
                    f"A connector cannot be the {role} of another connector",
                )
        return ConnectorVerdict.accept()

    def validate_in_context(
        self,
        candidate: Component,
        endpoints: Endpoints,
        existing: Iterable[Component],
        context_id: Optional[str],
    ) -> ConnectorVerdict:
        """
        Checks of the rule registered for context_id.

        Existing connectors are narrowed to the context, without the
        candidate itself. No registered rule means no restriction.
        """
        rule = self._registry.get_rule(context_id) if context_id is not None else None
        if rule is None:
            return ConnectorVerdict.accept(context_id)

        endpoints = _as_endpoints(endpoints, context_id)
        scoped = [
            c for c in existing
            if c.kind is ComponentKind.CONNECTOR and c.id != candidate.id and context_id in c.contexts
        ]
        verdict = self._check_rule(rule, candidate, endpoints, scoped)
        return verdict.in_context(context_id)

    # =========================================================================
    # Internals
    # =========================================================================

    def _check_rule(
        self,
        rule: ValidationRule,
        candidate: Component,
        endpoints: ConnectorEndpoints,
        scoped: List[Component],
    ) -> ConnectorVerdict:
        payload = candidate.payload
        source_kind = endpoints.source.kind
        target_kind = endpoints.target.kind

        if rule.allowed_from_kinds is not None and source_kind not in rule.allowed_from_kinds:
            return ConnectorVerdict.reject(
                RejectionCode.SOURCE_KIND_NOT_ALLOWED,
                f"{source_kind.value} components are not allowed as a source in this context",
            )
        if rule.allowed_to_kinds is not None and target_kind not in rule.allowed_to_kinds:
            return ConnectorVerdict.reject(
                RejectionCode.TARGET_KIND_NOT_ALLOWED,
                f"{target_kind.value} components are not allowed as a destination in this context",
            )
        if rule.is_forbidden(source_kind, target_kind):
            return ConnectorVerdict.reject(
                RejectionCode.FORBIDDEN_PAIR,
                f"Connecting {source_kind.value} to {target_kind.value} is forbidden in this context",
            )

        if rule.max_connections_from is not None:
            outgoing = sum(1 for c in scoped if c.payload.from_id == payload.from_id)
            if outgoing >= rule.max_connections_from:
                return ConnectorVerdict.reject(
                    RejectionCode.MAX_OUTGOING_EXCEEDED,
                    f"The source component has reached the maximum number of outgoing "
                    f"connections ({rule.max_connections_from})",
                )
        if rule.max_connections_to is not None:
            incoming = sum(1 for c in scoped if c.payload.to_id == payload.to_id)
            if incoming >= rule.max_connections_to:
                return ConnectorVerdict.reject(
                    RejectionCode.MAX_INCOMING_EXCEEDED,
                    f"The destination component has reached the maximum number of incoming "
                    f"connections ({rule.max_connections_to})",
                )

        if rule.requires_bidirectional and not payload.bidirectional:
            return ConnectorVerdict.reject(
                RejectionCode.BIDIRECTIONAL_REQUIRED,
                "Connections must be bidirectional in this context",
            )

        if rule.custom_validator is not None:
            verdict = rule.custom_validator(candidate, endpoints, scoped)
            if not isinstance(verdict, ConnectorVerdict):
                raise TypeError(
                    f"Custom validator of rule '{rule.name}' returned {type(verdict).__name__}, "
                    f"expected ConnectorVerdict"
                )
            if not verdict.accepted and verdict.code is None:
                verdict = ConnectorVerdict.reject(
                    RejectionCode.CUSTOM_REJECTED,
                    verdict.reason or f"Rejected by rule '{rule.name}'",
                )
            return verdict

        return ConnectorVerdict.accept()

    @staticmethod
    def _rejected(candidate: Component, verdict: ConnectorVerdict) -> ConnectorVerdict:
        where = f" in context '{verdict.context_id}'" if verdict.context_id else ""
        Log.info(f"ConnectorRuleEngine: Rejected {candidate}{where}: {verdict.reason}")
        return verdict

"""
Preset connector rules

Ready-made ValidationRule values for common diagram shapes, plus the example
per-step rules a wizard installs by default.

    registry.register_rule("step-1", DAG)
    registry.register_rule("step-2", SEQUENTIAL.with_changes(max_connections_from=2))
"""
from typing import Dict

from diagramflow.features.components.domain.component_kind import ComponentKind
from diagramflow.features.connectors.domain.connector_graph import AdjacencyIndex, find_cycle_path
from diagramflow.features.connectors.domain.validation_rule import (
    ConnectorVerdict,
    RejectionCode,
    ValidationRule,
)


def reject_cycles(candidate, endpoints, existing_connectors) -> ConnectorVerdict:
    """Custom validator rejecting a connector that would close a cycle in its context."""
    payload = candidate.payload
    index = AdjacencyIndex(existing_connectors)
    cycle = find_cycle_path(index, payload.from_id, payload.to_id, endpoints.context_id, exclude_id=candidate.id)
    if cycle is not None:
        return ConnectorVerdict.reject(
            RejectionCode.CYCLE_DETECTED,
            f"This connection would create a cycle: {' -> '.join(cycle)}",
        )
    return ConnectorVerdict.accept()


PERMISSIVE = ValidationRule(
    name="permissive",
    description="No restriction",
)

STRICT_TREE = ValidationRule(
    name="strict-tree",
    description="At most one incoming connection per component, no cycles",
    max_connections_to=1,
    custom_validator=reject_cycles,
)

DAG = ValidationRule(
    name="dag",
    description="Directed acyclic graph",
    custom_validator=reject_cycles,
)

SEQUENTIAL = ValidationRule(
    name="sequential",
    description="A single chain: at most one connection in and one out per component",
    max_connections_from=1,
    max_connections_to=1,
)


# =============================================================================
# Example step rules
# =============================================================================

FLOW_KINDS = (ComponentKind.START_END, ComponentKind.PROCESS, ComponentKind.DECISION, ComponentKind.DATA)


def _reject_data_to_data(candidate, endpoints, existing_connectors) -> ConnectorVerdict:
    if endpoints.source.kind is ComponentKind.DATA and endpoints.target.kind is ComponentKind.DATA:
        return ConnectorVerdict.reject(
            RejectionCode.CUSTOM_REJECTED,
            "A data component cannot connect directly to another data component",
        )
    return ConnectorVerdict.accept()


def _reject_one_way_reverse(candidate, endpoints, existing_connectors) -> ConnectorVerdict:
    payload = candidate.payload
    reverse_exists = any(
        c.payload.from_id == payload.to_id and c.payload.to_id == payload.from_id
        for c in existing_connectors
    )
    if reverse_exists and not payload.bidirectional:
        return ConnectorVerdict.reject(
            RejectionCode.CUSTOM_REJECTED,
            "A reverse connection already exists; use a bidirectional connection",
        )
    return ConnectorVerdict.accept()


def default_step_rules() -> Dict[str, ValidationRule]:
    """Example rules keyed by wizard step id."""
    return {
        "flowchart-step": ValidationRule(
            name="flowchart-step",
            description="Simple flowchart",
            allowed_from_kinds=FLOW_KINDS,
            allowed_to_kinds=FLOW_KINDS,
            forbidden_pairs=((ComponentKind.START_END, ComponentKind.START_END),),
            max_connections_from=10,
            max_connections_to=10,
        ),
        "decision-tree-step": ValidationRule(
            name="decision-tree-step",
            description="Decision tree: two exits per decision, one entry per node",
            allowed_from_kinds=(ComponentKind.DECISION, ComponentKind.START_END),
            allowed_to_kinds=(ComponentKind.DECISION, ComponentKind.PROCESS, ComponentKind.START_END),
            max_connections_from=2,
            max_connections_to=1,
            forbidden_pairs=((ComponentKind.PROCESS, ComponentKind.DECISION),),
        ),
        "data-flow-step": ValidationRule(
            name="data-flow-step",
            description="Data flow between data and process components",
            allowed_from_kinds=(ComponentKind.DATA, ComponentKind.PROCESS),
            allowed_to_kinds=(ComponentKind.DATA, ComponentKind.PROCESS),
            custom_validator=_reject_data_to_data,
        ),
        "custom-diagram-step": ValidationRule(
            name="custom-diagram-step",
            description="Free-form diagram",
        ),
        "process-network-step": ValidationRule(
            name="process-network-step",
            description="Network of processes linked both ways",
            allowed_from_kinds=(ComponentKind.PROCESS,),
            allowed_to_kinds=(ComponentKind.PROCESS,),
            requires_bidirectional=True,
            custom_validator=_reject_one_way_reverse,
        ),
    }


def register_default_rules(registry) -> None:
    """Install default_step_rules() into a RuleRegistry."""
    for context_id, rule in default_step_rules().items():
        registry.register_rule(context_id, rule)

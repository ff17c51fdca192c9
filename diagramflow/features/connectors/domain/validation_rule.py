"""
Connector validation rule value objects

A ValidationRule is the per-context configuration that constrains which
connectors are acceptable. A ConnectorVerdict is the outcome of checking one
candidate connector, with a machine-readable RejectionCode next to the
human-readable reason.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, FrozenSet, Iterable, Optional, Tuple

from diagramflow.features.components.domain.component_kind import ComponentKind


class RejectionCode(Enum):
    INVALID_CONNECTOR = "invalid-connector"
    INVALID_ENDPOINT = "invalid-endpoint"
    SOURCE_KIND_NOT_ALLOWED = "source-kind-not-allowed"
    TARGET_KIND_NOT_ALLOWED = "target-kind-not-allowed"
    FORBIDDEN_PAIR = "forbidden-pair"
    MAX_OUTGOING_EXCEEDED = "max-outgoing-exceeded"
    MAX_INCOMING_EXCEEDED = "max-incoming-exceeded"
    BIDIRECTIONAL_REQUIRED = "bidirectional-required"
    CYCLE_DETECTED = "cycle-detected"
    CUSTOM_REJECTED = "custom-rejected"


@dataclass(frozen=True)
class ConnectorVerdict:
    """
    Outcome of validating a candidate connector.

    Truthy when accepted, so `if engine.validate_connector(...):` reads naturally.
    """
    accepted: bool
    reason: Optional[str] = None
    code: Optional[RejectionCode] = None
    context_id: Optional[str] = None

    @classmethod
    def accept(cls, context_id: Optional[str] = None) -> 'ConnectorVerdict':
        return cls(accepted=True, context_id=context_id)

    @classmethod
    def reject(cls, code: RejectionCode, reason: str, context_id: Optional[str] = None) -> 'ConnectorVerdict':
        return cls(accepted=False, reason=reason, code=code, context_id=context_id)

    def in_context(self, context_id: Optional[str]) -> 'ConnectorVerdict':
        return replace(self, context_id=context_id)

    def __bool__(self) -> bool:
        return self.accepted


@dataclass(frozen=True)
class ConnectorEndpoints:
    """The resolved source and destination of a candidate, plus the context being checked."""
    source: object
    target: object
    context_id: Optional[str] = None


@dataclass(frozen=True)
class ForbiddenPair:
    from_kind: ComponentKind
    to_kind: ComponentKind

    def __post_init__(self):
        object.__setattr__(self, "from_kind", ComponentKind.from_string(self.from_kind))
        object.__setattr__(self, "to_kind", ComponentKind.from_string(self.to_kind))

    @classmethod
    def from_value(cls, value) -> 'ForbiddenPair':
        if isinstance(value, ForbiddenPair):
            return value
        from_kind, to_kind = value
        return cls(from_kind, to_kind)


def _kind_set(kinds: Optional[Iterable]) -> Optional[FrozenSet[ComponentKind]]:
    if kinds is None:
        return None
    return frozenset(ComponentKind.from_string(k) for k in kinds)


@dataclass(frozen=True)
class ValidationRule:
    """
    Per-context connection constraints. Unset fields do not restrict.

    Attributes:
        name: Identifier used in logs and listings
        description: Human-readable summary
        allowed_from_kinds: Kinds allowed as a source
        allowed_to_kinds: Kinds allowed as a destination
        max_connections_from: Max outgoing connectors per source
        max_connections_to: Max incoming connectors per destination
        forbidden_pairs: (from_kind, to_kind) combinations that are rejected
        requires_bidirectional: Only bidirectional connectors are accepted
        custom_validator: (candidate, endpoints, existing_connectors) -> ConnectorVerdict,
            run last and only when every structural check passed
    """
    name: str = ""
    description: str = ""
    allowed_from_kinds: Optional[FrozenSet[ComponentKind]] = None
    allowed_to_kinds: Optional[FrozenSet[ComponentKind]] = None
    max_connections_from: Optional[int] = None
    max_connections_to: Optional[int] = None
    forbidden_pairs: Tuple[ForbiddenPair, ...] = ()
    requires_bidirectional: bool = False
    custom_validator: Optional[Callable[..., ConnectorVerdict]] = None

    def __post_init__(self):
        object.__setattr__(self, "allowed_from_kinds", _kind_set(self.allowed_from_kinds))
        object.__setattr__(self, "allowed_to_kinds", _kind_set(self.allowed_to_kinds))
        object.__setattr__(self, "forbidden_pairs", tuple(ForbiddenPair.from_value(p) for p in self.forbidden_pairs))
        for limit_name in ("max_connections_from", "max_connections_to"):
            limit = getattr(self, limit_name)
            if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 0):
                raise ValueError(f"{limit_name} must be a non-negative integer, got {limit!r}")

    def is_forbidden(self, from_kind: ComponentKind, to_kind: ComponentKind) -> bool:
        return ForbiddenPair(from_kind, to_kind) in self.forbidden_pairs

    def with_changes(self, **changes) -> 'ValidationRule':
        """Derive a new rule, e.g. PRESET.with_changes(max_connections_from=2)."""
        return replace(self, **changes)

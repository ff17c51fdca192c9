"""
Domain errors

Error taxonomy for the component model, the store and the connector rule
engine. Every error is a rejected operation the caller can retry with
corrected input; none of them is fatal to the process.
"""
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from diagramflow.features.connectors.domain.validation_rule import ConnectorVerdict


class DiagramError(Exception):
    """Base exception for diagram domain operations."""
    pass


class UnknownKindError(DiagramError):
    """Raised when the factory is given an unrecognized kind discriminator."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Unknown component kind: {kind!r}")


class InvalidEntityError(DiagramError):
    """Raised when an entity fails validation where the store would expose it."""

    def __init__(self, component_id: str, violations: List[str]):
        self.component_id = component_id
        self.violations = list(violations)
        message = f"Invalid component '{component_id}'"
        if self.violations:
            message += f": {'; '.join(self.violations)}"
        super().__init__(message)


class PostUpdateInvalidError(DiagramError):
    """Raised when a store update would leave an entity invalid (the update is rolled back)."""

    def __init__(self, component_id: str, violations: List[str]):
        self.component_id = component_id
        self.violations = list(violations)
        message = f"Component '{component_id}' became invalid after update"
        if self.violations:
            message += f": {'; '.join(self.violations)}"
        super().__init__(message)


class ComponentNotFoundError(DiagramError):
    """Raised when a component id is not present in a store."""

    def __init__(self, component_id: str, context: str = ""):
        self.component_id = component_id
        self.context = context
        message = f"Component with id '{component_id}' not found"
        if context:
            message += f" ({context})"
        super().__init__(message)


class DuplicateComponentError(DiagramError):
    """Raised when adding a component whose id is already stored."""

    def __init__(self, component_id: str):
        self.component_id = component_id
        super().__init__(f"Component with id '{component_id}' already exists")


class ConnectorRejected(DiagramError):
    """Raised when a candidate connector fails intrinsic or contextual validation."""

    def __init__(self, verdict: "ConnectorVerdict"):
        self.verdict = verdict
        self.reason = verdict.reason
        self.code = verdict.code
        self.context_id = verdict.context_id
        super().__init__(verdict.reason or "Connector rejected")


class PortableFormatError(DiagramError):
    """Raised when portable text cannot be parsed into a list of records."""
    pass


class DeserializationSkipped(DiagramError):
    """
    A single malformed record skipped during bulk load.

    Collected in a LoadReport rather than raised, so one broken record never
    aborts the rest of the batch.
    """

    def __init__(self, index: int, component_id: Optional[str], reason: str):
        self.index = index
        self.component_id = component_id
        self.reason = reason
        label = f"'{component_id}'" if component_id else "without id"
        super().__init__(f"Skipped record #{index} ({label}): {reason}")

"""
Shared domain layer.

Contains the error taxonomy used across features.
"""
from diagramflow.shared.domain.errors import (
    DiagramError,
    UnknownKindError,
    InvalidEntityError,
    PostUpdateInvalidError,
    ComponentNotFoundError,
    DuplicateComponentError,
    ConnectorRejected,
    PortableFormatError,
    DeserializationSkipped,
)

__all__ = [
    'DiagramError',
    'UnknownKindError',
    'InvalidEntityError',
    'PostUpdateInvalidError',
    'ComponentNotFoundError',
    'DuplicateComponentError',
    'ConnectorRejected',
    'PortableFormatError',
    'DeserializationSkipped',
]

"""
Connection Session

Two-click connection flow for an editor: pick a source, then a destination.

    Idle -> SourceSelected(source) -> Accepted(connector) | Rejected(reason) -> Idle

After every select_target() the session is back to Idle; the outcome is
returned and kept as last_outcome.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from diagramflow.features.components.domain.component import Component
from diagramflow.features.components.domain.component_kind import ComponentKind
from diagramflow.features.connectors.application.connector_service import ConnectorService
from diagramflow.features.connectors.domain.validation_rule import RejectionCode
from diagramflow.shared.domain.errors import ConnectorRejected
from diagramflow.utils.message import Log


class SessionState(Enum):
    IDLE = "idle"
    SOURCE_SELECTED = "source-selected"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class SessionOutcome:
    state: SessionState
    connector: Optional[Component] = None
    reason: Optional[str] = None
    code: Optional[RejectionCode] = None

    @property
    def accepted(self) -> bool:
        return self.state is SessionState.ACCEPTED


class ConnectionSession:
    """State machine driving connector creation in one context."""

    def __init__(self, service: ConnectorService, context_id: Optional[str] = None):
        self._service = service
        self._context_id = context_id
        self._state = SessionState.IDLE
        self._source_id: Optional[str] = None
        self._last_outcome: Optional[SessionOutcome] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def source_id(self) -> Optional[str]:
        return self._source_id

    @property
    def context_id(self) -> Optional[str]:
        return self._context_id

    @property
    def last_outcome(self) -> Optional[SessionOutcome]:
        return self._last_outcome

    def select_source(self, component_id: str) -> None:
        """
        Start (or restart) a connection from a component.

        Raises:
            ComponentNotFoundError: If the component is not stored
            ValueError: If the component is a connector
        """
        component = self._service.store.require(component_id)
        if component.kind is ComponentKind.CONNECTOR:
            raise ValueError("A connector cannot be the source of a connection")
        self._source_id = component_id
        self._state = SessionState.SOURCE_SELECTED
        Log.debug(f"ConnectionSession: Source selected {component}")

    def select_target(self, component_id: str, **fields) -> SessionOutcome:
        """
        Finish the connection at a component.

        Returns:
            SessionOutcome (ACCEPTED with the stored connector, or REJECTED with the reason)

        Raises:
            ValueError: If no source is selected
        """
        if self._state is not SessionState.SOURCE_SELECTED:
            raise ValueError("Select a source before selecting a target")

        try:
            connector = self._service.connect(self._source_id, component_id, self._context_id, **fields)
            outcome = SessionOutcome(SessionState.ACCEPTED, connector=connector)
        except ConnectorRejected as e:
            outcome = SessionOutcome(SessionState.REJECTED, reason=e.reason, code=e.code)
        finally:
            self._reset()

        self._last_outcome = outcome
        return outcome

    def cancel(self) -> None:
        if self._state is not SessionState.IDLE:
            Log.debug("ConnectionSession: Cancelled")
        self._reset()

    def _reset(self) -> None:
        self._state = SessionState.IDLE
        self._source_id = None

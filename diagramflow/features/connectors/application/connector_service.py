"""
Connector Service

Orchestrates connector use cases over a component store: validating a
proposed connection, creating it through the factory, and removing or
listing connectors.
"""
from typing import List, Optional, Tuple

from diagramflow.features.components.application.component_factory import ComponentFactory, parse_contexts
from diagramflow.features.components.domain.component import Component
from diagramflow.features.components.domain.component_kind import ComponentKind, require_kind
from diagramflow.features.components.domain.connector import calculate_auto_direction
from diagramflow.features.components.infrastructure.component_store import ComponentStore
from diagramflow.features.connectors.application.connector_rule_engine import ConnectorRuleEngine
from diagramflow.features.connectors.domain.validation_rule import ConnectorVerdict
from diagramflow.shared.domain.errors import ComponentNotFoundError
from diagramflow.utils.message import Log


class ConnectorService:
    """
    Service for managing connectors between components.

    Orchestrates connector operations:
    - Validating a proposed connection without committing it
    - Creating connectors that pass validation
    - Removing connectors
    - Listing connectors per context or per component
    """

    def __init__(
        self,
        store: ComponentStore,
        engine: ConnectorRuleEngine,
        factory: Optional[ComponentFactory] = None
    ):
        """
        Initialize connector service.

        Args:
            store: Store holding components and connectors
            engine: Rule engine used to accept or reject connectors
            factory: Factory used to build connectors (defaults to the store's)
        """
        self._store = store
        self._engine = engine
        self._factory = factory or store.factory
        Log.info("ConnectorService: Initialized")

    @property
    def store(self) -> ComponentStore:
        return self._store

    @property
    def engine(self) -> ConnectorRuleEngine:
        return self._engine

    def validate_connection(
        self,
        from_id: str,
        to_id: str,
        context_id: Optional[str] = None,
        **fields
    ) -> ConnectorVerdict:
        """
        Check whether a connection would be accepted.

        Does not create the connector. The rules of every context the connector
        would belong to (context_id plus any given in fields) are checked.

        Args:
            from_id: Source component identifier
            to_id: Destination component identifier
            context_id: Context the connector would belong to
            **fields: Extra connector fields (label, bidirectional, style, ...)

        Returns:
            ConnectorVerdict
        """
        candidate, source, target = self._build_candidate(from_id, to_id, context_id, fields)
        return self._engine.validate_connector(candidate, (source, target), self._store.connectors_in_context(None))

    def connect(
        self,
        from_id: str,
        to_id: str,
        context_id: Optional[str] = None,
        **fields
    ) -> Component:
        """
        Connect two components.

        The arrow direction is derived from the components' positions unless
        given in fields.

        Returns:
            The stored connector

        Raises:
            ConnectorRejected: If validation fails (missing endpoints, self
                loop, or the rule of any of its contexts rejects the connection)
        """
        candidate, source, target = self._build_candidate(from_id, to_id, context_id, fields)
        self._engine.ensure_acceptable(candidate, (source, target), self._store.connectors_in_context(None))
        connector = self._store.add(candidate)

        Log.info(f"ConnectorService: Connected {source} -> {target} as {connector.id}")
        return connector

    def disconnect(self, connector_id: str) -> None:
        """
        Remove a connector.

        Raises:
            ComponentNotFoundError: If no component has this id
            TypeError: If the component is not a connector
        """
        connector = self._store.get(connector_id)
        if connector is None:
            raise ComponentNotFoundError(connector_id, "disconnect")
        require_kind(connector, ComponentKind.CONNECTOR)

        self._store.remove(connector_id)
        Log.info(f"ConnectorService: Disconnected connector {connector_id}")

    def list_connectors(self, context_id: Optional[str] = None) -> List[Component]:
        """Connectors in a context, or every connector when context_id is None."""
        return self._store.connectors_in_context(context_id)

    def connectors_for_component(
        self,
        component_id: str,
        context_id: Optional[str] = None
    ) -> Tuple[List[Component], List[Component]]:
        """
        Connectors attached to a component.

        Returns:
            (outgoing, incoming) connector lists
        """
        connectors = self._store.connectors_in_context(context_id)
        outgoing = [c for c in connectors if c.payload.from_id == component_id]
        incoming = [c for c in connectors if c.payload.to_id == component_id]
        return outgoing, incoming

    def _build_candidate(self, from_id: str, to_id: str, context_id: Optional[str], fields: dict):
        source = self._store.get(from_id)
        target = self._store.get(to_id)

        fields = dict(fields)
        contexts = set(parse_contexts(fields.pop("contexts", None)))
        if context_id is not None:
            contexts.add(context_id)
        if "direction" not in fields and source is not None and target is not None:
            fields["direction"] = calculate_auto_direction(source, target)

        candidate = self._factory.create_connector(from_id, to_id, contexts=contexts, **fields)
        return candidate, source, target

"""
Component Store

In-memory store of components keyed by id, with filtering, cloning and a
portable (JSON) form for persistence and transfer.

The store owns its entities: add() keeps a private copy and every accessor
hands out deep snapshots, so update() is the only way to change stored state.
update() runs the mutator on a working copy and commits only if the result is
still valid; otherwise the stored original is left untouched.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from diagramflow.features.components.application.component_factory import ComponentFactory
from diagramflow.features.components.domain.component import Component
from diagramflow.features.components.domain.component_kind import ComponentKind
from diagramflow.shared.domain.errors import (
    ComponentNotFoundError,
    DeserializationSkipped,
    DuplicateComponentError,
    InvalidEntityError,
    PortableFormatError,
    PostUpdateInvalidError,
    UnknownKindError,
)
from diagramflow.utils.message import Log


# =============================================================================
# Query criteria
# =============================================================================

@dataclass(frozen=True)
class ComponentFilter:
    """
    Query criteria over stored components.

    Unset fields match everything. Filters compose by AND:
        ComponentFilter(kind="process") & ComponentFilter(context_id="step-1")
    """
    kind: Optional[ComponentKind] = None
    context_id: Optional[str] = None
    search: Optional[str] = None
    combined: Tuple['ComponentFilter', ...] = ()

    def __post_init__(self):
        if self.kind is not None:
            object.__setattr__(self, "kind", ComponentKind.from_string(self.kind))

    def __and__(self, other: 'ComponentFilter') -> 'ComponentFilter':
        if not isinstance(other, ComponentFilter):
            return NotImplemented
        return ComponentFilter(combined=(self, other))

    def matches(self, component: Component) -> bool:
        if self.kind is not None and component.kind is not self.kind:
            return False
        if self.context_id is not None and self.context_id not in component.contexts:
            return False
        if self.search and not component.content.matches(self.search):
            return False
        return all(part.matches(component) for part in self.combined)


@dataclass
class LoadReport:
    """Outcome of a bulk load: how many records were stored, which were skipped and why."""
    loaded: int = 0
    skipped: List[DeserializationSkipped] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.skipped


# =============================================================================
# Store
# =============================================================================

class ComponentStore:
    """
    In-memory component store.

    Keeps insertion order. Single-threaded; callers that share a store across
    threads synchronize externally.
    """

    def __init__(self, factory: Optional[ComponentFactory] = None):
        self._factory = factory or ComponentFactory()
        self._components: Dict[str, Component] = {}
        Log.debug("ComponentStore: Initialized")

    @property
    def factory(self) -> ComponentFactory:
        return self._factory

    # =========================================================================
    # CRUD
    # =========================================================================

    def add(self, component: Component) -> Component:
        """
        Validate and store a copy of a component.

        Returns:
            Snapshot of the stored component

        Raises:
            InvalidEntityError: If the component fails validation
            DuplicateComponentError: If a component with the same id is stored
        """
        result = component.check()
        if not result.valid:
            Log.warning(f"ComponentStore: Rejected invalid component {component}: {'; '.join(result.errors)}")
            raise InvalidEntityError(component.id, result.errors)
        if component.id in self._components:
            raise DuplicateComponentError(component.id)

        self._components[component.id] = component.copy()
        Log.info(f"ComponentStore: Added {component}")
        return component.copy()

    def create_and_add(self, kind, partial: Optional[Mapping[str, Any]] = None, **fields) -> Component:
        """Create a component through the factory and add it."""
        return self.add(self._factory.create(kind, partial, **fields))

    def get(self, component_id: str) -> Optional[Component]:
        component = self._components.get(component_id)
        return component.copy() if component is not None else None

    def require(self, component_id: str) -> Component:
        """
        Get a component or fail.

        Raises:
            ComponentNotFoundError: If no component has this id
        """
        component = self.get(component_id)
        if component is None:
            raise ComponentNotFoundError(component_id)
        return component

    def has(self, component_id: str) -> bool:
        return component_id in self._components

    def update(self, component_id: str, mutator: Callable[[Component], Any]) -> Component:
        """
        Apply a mutation and commit it only if the result stays valid.

        The mutator receives a working copy. Exceptions it raises propagate and
        leave the stored component unchanged.

        Returns:
            Snapshot of the committed component

        Raises:
            ComponentNotFoundError: If no component has this id
            PostUpdateInvalidError: If the mutated component is invalid or its
                id changed (the update is rolled back)
        """
        original = self._components.get(component_id)
        if original is None:
            raise ComponentNotFoundError(component_id, "update")

        working = original.copy()
        mutator(working)

        if working.id != component_id:
            raise PostUpdateInvalidError(component_id, [f"id cannot change (got '{working.id}')"])
        result = working.check()
        if not result.valid:
            Log.warning(
                f"ComponentStore: Rolled back update of {original}: {'; '.join(result.errors)}"
            )
            raise PostUpdateInvalidError(component_id, result.errors)

        self._components[component_id] = working
        Log.debug(f"ComponentStore: Updated {working}")
        return working.copy()

    def remove(self, component_id: str, cascade: bool = False) -> bool:
        """
        Remove a component.

        Args:
            component_id: Id of the component to remove
            cascade: Also remove connectors that use it as an endpoint

        Returns:
            True if the component was stored
        """
        if component_id not in self._components:
            return False
        removed = self._components.pop(component_id)
        Log.info(f"ComponentStore: Removed {removed}")

        if cascade:
            attached = [
                c.id for c in self._components.values()
                if c.kind is ComponentKind.CONNECTOR
                and component_id in (c.payload.from_id, c.payload.to_id)
            ]
            for connector_id in attached:
                del self._components[connector_id]
            if attached:
                Log.info(f"ComponentStore: Removed {len(attached)} connector(s) attached to {component_id}")
        return True

    def count(self) -> int:
        return len(self._components)

    def get_all(self) -> List[Component]:
        return [c.copy() for c in self._components.values()]

    def clear(self) -> None:
        self._components.clear()
        Log.info("ComponentStore: Cleared")

    def __len__(self) -> int:
        return len(self._components)

    def __contains__(self, component_id: str) -> bool:
        return component_id in self._components

    # =========================================================================
    # Queries
    # =========================================================================

    def filter(self, criteria: Optional[ComponentFilter] = None, **kwargs) -> List[Component]:
        """
        Components matching every criterion.

        Args:
            criteria: A ComponentFilter (possibly combined with &)
            **kwargs: kind, context_id and/or search, ANDed with criteria
        """
        if kwargs:
            keyword_filter = ComponentFilter(**kwargs)
            criteria = keyword_filter if criteria is None else criteria & keyword_filter
        if criteria is None:
            return self.get_all()
        return [c.copy() for c in self._components.values() if criteria.matches(c)]

    def get_by_kind(self, kind) -> List[Component]:
        return self.filter(kind=kind)

    def get_by_context(self, context_id: str) -> List[Component]:
        return self.filter(context_id=context_id)

    def connectors_in_context(self, context_id: Optional[str]) -> List[Component]:
        """Connectors in a context; None lists every connector."""
        if context_id is None:
            return self.filter(kind=ComponentKind.CONNECTOR)
        return self.filter(kind=ComponentKind.CONNECTOR, context_id=context_id)

    def dangling_connectors(self) -> List[Component]:
        """Connectors whose source or destination is not stored."""
        return [
            c.copy() for c in self._components.values()
            if c.kind is ComponentKind.CONNECTOR
            and (c.payload.from_id not in self._components or c.payload.to_id not in self._components)
        ]

    def get_stats(self) -> Dict[str, int]:
        """Count per kind tag plus a total, computed from current contents."""
        stats = {kind.value: 0 for kind in ComponentKind}
        for component in self._components.values():
            stats[component.kind.value] += 1
        stats["total"] = len(self._components)
        return stats

    # =========================================================================
    # Cloning
    # =========================================================================

    def clone(self, component_id: str) -> Component:
        """
        Duplicate a stored component under a new id and store the duplicate.

        Raises:
            ComponentNotFoundError: If no component has this id
        """
        original = self._components.get(component_id)
        if original is None:
            raise ComponentNotFoundError(component_id, "clone")
        return self.add(self._factory.clone_existing(original))

    # =========================================================================
    # Portable form
    # =========================================================================

    def to_portable(self) -> List[dict]:
        """Serialized records of every component, in insertion order."""
        return [c.to_dict() for c in self._components.values()]

    def from_portable(self, records: Iterable[Mapping[str, Any]]) -> LoadReport:
        """
        Replace the store contents with the given records.

        Malformed, invalid or duplicate records are skipped and reported;
        one bad record never aborts the batch.

        Raises:
            PortableFormatError: If records is not a list of records
        """
        if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Iterable):
            raise PortableFormatError(f"Expected a list of records, got {type(records).__name__}")

        loaded: Dict[str, Component] = {}
        report = LoadReport()
        for index, record in enumerate(records):
            record_id = record.get("id") if isinstance(record, Mapping) else None
            try:
                component = self._factory.create_from_serialized(record)
            except (UnknownKindError, TypeError, ValueError, KeyError) as e:
                report.skipped.append(DeserializationSkipped(index, record_id, str(e)))
                continue

            result = component.check()
            if not result.valid:
                report.skipped.append(DeserializationSkipped(index, component.id, "; ".join(result.errors)))
            elif component.id in loaded:
                report.skipped.append(DeserializationSkipped(index, component.id, "duplicate id"))
            else:
                loaded[component.id] = component

        self._components = loaded
        report.loaded = len(loaded)
        for skipped in report.skipped:
            Log.warning(f"ComponentStore: {skipped}")
        Log.info(f"ComponentStore: Loaded {report.loaded} component(s), skipped {len(report.skipped)}")
        return report

    def export_text(self, indent: Optional[int] = None) -> str:
        """JSON text of the portable form. indent defaults to the export_indent setting."""
        if indent is None:
            indent = self._factory.settings.get_export_indent()
        return json.dumps(self.to_portable(), indent=indent, ensure_ascii=False)

    def import_text(self, text: str) -> LoadReport:
        """
        Replace the store contents from JSON text.

        Raises:
            PortableFormatError: If the text is not JSON or not a list
        """
        try:
            records = json.loads(text)
        except (TypeError, json.JSONDecodeError) as e:
            raise PortableFormatError(f"Invalid portable text: {e}") from e
        if not isinstance(records, list):
            raise PortableFormatError(f"Expected a list of records, got {type(records).__name__}")
        return self.from_portable(records)

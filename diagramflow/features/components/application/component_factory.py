"""
Component Factory

Builds components from the kind table: fully defaulted new components,
components restored from serialized records, and clones. Every construction
path goes through create(), so the kind table is the single dispatch point.
"""
from dataclasses import fields as dataclass_fields
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from diagramflow.features.components.domain.component import Component
from diagramflow.features.components.domain.component_kind import ComponentKind, ShapeType
from diagramflow.features.components.domain.data import DEFAULT_DATA_TYPE
from diagramflow.features.components.domain.decision import DEFAULT_CONDITIONS, DEFAULT_QUESTION
from diagramflow.features.components.domain.kind_table import get_kind_spec
from diagramflow.features.components.domain.process import DEFAULT_PROCESS_NAME
from diagramflow.features.components.domain.properties import Content, Position, Style
from diagramflow.shared.domain.errors import UnknownKindError
from diagramflow.utils.message import Log
from diagramflow.utils.settings import Settings, get_settings

ENVELOPE_FIELDS = (
    "id", "shape", "position", "style", "content",
    "contexts", "extensions", "created_at", "updated_at",
)


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value)
    else:
        raise TypeError(f"Invalid timestamp: {value!r}")
    if parsed is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_contexts(value) -> frozenset:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset({value})
    return frozenset(value)


def _build_value(value_type, defaults: Mapping, patch):
    """Layer a caller patch (mapping or ready-made value) over defaults."""
    if isinstance(patch, value_type):
        return patch
    if patch is not None and not isinstance(patch, Mapping):
        raise TypeError(f"{value_type.__name__.lower()} must be a mapping, got {type(patch).__name__}")
    return value_type(**{**defaults, **(patch or {})})


class ComponentFactory:
    """
    Factory for every component kind.

    Defaults come from the kind table (shape, palette, label, payload) and
    from settings (position). Created components are not validated here, so
    callers can collect violations with validate_all().
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    @staticmethod
    def parse_kind(kind) -> ComponentKind:
        """
        Resolve a kind discriminator.

        Raises:
            UnknownKindError: If the value names no kind
        """
        try:
            return ComponentKind.from_string(kind)
        except ValueError:
            raise UnknownKindError(kind) from None

    def create(self, kind, partial: Optional[Mapping[str, Any]] = None, **fields) -> Component:
        """
        Create a component of the given kind.

        Args:
            kind: ComponentKind or its string tag
            partial: Envelope and payload fields to set; nested position,
                style and content mappings are merged over the defaults
            **fields: Same as partial, merged over it

        Returns:
            A fully defaulted Component (not validated)

        Raises:
            UnknownKindError: If kind is not recognized
            TypeError: If a field name is unknown for this kind
        """
        kind = self.parse_kind(kind)
        spec = get_kind_spec(kind)
        values = dict(partial or {})
        values.update(fields)
        values.pop("kind", None)

        payload_names = {f.name for f in dataclass_fields(spec.payload_type)}
        unknown = set(values) - payload_names - set(ENVELOPE_FIELDS)
        if unknown:
            raise TypeError(f"Unknown field(s) for {kind.value} component: {sorted(unknown)}")

        payload = spec.build_payload({k: v for k, v in values.items() if k in payload_names})

        return Component(
            id=values.get("id"),
            kind=kind,
            shape=ShapeType.from_string(values.get("shape") or spec.default_shape),
            position=_build_value(Position, self.settings.get_default_position(), values.get("position")),
            style=_build_value(Style, spec.style_defaults(payload), values.get("style")),
            content=_build_value(Content, spec.content_defaults(payload), values.get("content")),
            payload=payload,
            contexts=parse_contexts(values.get("contexts")),
            extensions=dict(values.get("extensions") or {}),
            created_at=_parse_timestamp(values.get("created_at")),
            updated_at=_parse_timestamp(values.get("updated_at")),
        )

    # ========== Shortcuts ==========

    def create_process(self, process_name: str = DEFAULT_PROCESS_NAME, description: str = "", **fields) -> Component:
        return self.create(ComponentKind.PROCESS, process_name=process_name, description=description, **fields)

    def create_decision(self, question: str = DEFAULT_QUESTION, conditions: Iterable[str] = DEFAULT_CONDITIONS,
                        **fields) -> Component:
        return self.create(ComponentKind.DECISION, question=question, conditions=tuple(conditions), **fields)

    def create_start(self, **fields) -> Component:
        return self.create(ComponentKind.START_END, is_start=True, **fields)

    def create_end(self, **fields) -> Component:
        return self.create(ComponentKind.START_END, is_start=False, **fields)

    def create_data(self, data_type: str = DEFAULT_DATA_TYPE, data_fields: Iterable = (), **fields) -> Component:
        return self.create(ComponentKind.DATA, data_type=data_type, fields=tuple(data_fields), **fields)

    def create_custom(self, custom_properties: Optional[Dict[str, Any]] = None, **fields) -> Component:
        return self.create(ComponentKind.CUSTOM, custom_properties=custom_properties or {}, **fields)

    def create_connector(self, from_id: str, to_id: str, **fields) -> Component:
        return self.create(ComponentKind.CONNECTOR, from_id=from_id, to_id=to_id, **fields)

    # ========== Restore / clone ==========

    def create_from_serialized(self, record: Mapping[str, Any]) -> Component:
        """
        Restore a component from a record produced by Component.to_dict().

        The exact kind named by the record's `kind` discriminator is rebuilt,
        with id and timestamps preserved.

        Raises:
            UnknownKindError: If the discriminator is missing or unknown
            TypeError / ValueError / KeyError: If the record is structurally broken
        """
        if not isinstance(record, Mapping):
            raise TypeError(f"Serialized component must be a mapping, got {type(record).__name__}")
        if "kind" not in record:
            raise UnknownKindError(None)
        return self.create(record["kind"], record)

    def clone_existing(self, component: Component) -> Component:
        """Duplicate through the kind construction path with a new identity."""
        record = component.to_dict()
        record.update(id=None, created_at=None, updated_at=None)
        clone = self.create_from_serialized(record)
        Log.debug(f"ComponentFactory: Cloned {component} as {clone}")
        return clone

    @staticmethod
    def validate_all(components: Iterable[Component]) -> Dict[str, List[str]]:
        """
        Validate every component and collect the failures.

        Returns:
            Mapping of component id (or "<missing id #n>") to its full list of
            violations; valid components are omitted.
        """
        failures = {}
        for index, component in enumerate(components):
            result = component.check()
            if not result.valid:
                key = component.id or f"<missing id #{index}>"
                failures[key] = list(result.errors)
        return failures

"""
Keyed Registry Pattern

Generic key -> value registry with metadata. Backs the component kind
dispatch table and the per-context connector rule registry.

Usage:
    kinds = KeyedRegistry[KindSpec]("ComponentKind")
    kinds.register(ComponentKind.PROCESS, process_spec, description="Process box")

    spec = kinds.get(ComponentKind.PROCESS)

    for key, value, meta in kinds.list_all():
        print(f"{key}: {meta.description}")

Registries are plain objects owned by whoever constructs them. They are not
synchronized: a single caller is expected to mutate them at a time.
"""
from dataclasses import dataclass, field
from typing import Dict, Generic, Hashable, List, Optional, Tuple, TypeVar

from diagramflow.utils.message import Log


T = TypeVar('T')


@dataclass
class EntryMetadata:
    """
    Metadata for a registered value.

    Attributes:
        key: Registration key
        registry_name: Name of the registry this belongs to
        description: Optional description
        tags: Optional tags for categorization
    """
    key: Hashable
    registry_name: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)


class KeyedRegistry(Generic[T]):
    """
    Generic registry mapping hashable keys to values.

    Re-registering a key with a different value raises ValueError unless
    replace=True is passed.
    """

    def __init__(self, name: str):
        self._name = name
        self._values: Dict[Hashable, T] = {}
        self._metadata: Dict[Hashable, EntryMetadata] = {}
        Log.debug(f"KeyedRegistry: Created '{name}' registry")

    @property
    def name(self) -> str:
        return self._name

    def register(
        self,
        key: Hashable,
        value: T,
        description: str = "",
        tags: Optional[List[str]] = None,
        replace: bool = False,
    ) -> None:
        """
        Register a value under a key.

        Raises:
            ValueError: If key is already registered with a different value and replace is False
        """
        if key in self._values and not replace:
            if self._values[key] is value:
                return  # Same value, nothing to do
            raise ValueError(
                f"KeyedRegistry '{self._name}': Key '{key}' already registered"
            )

        self._values[key] = value
        self._metadata[key] = EntryMetadata(
            key=key,
            registry_name=self._name,
            description=description,
            tags=list(tags or []),
        )
        Log.debug(f"KeyedRegistry '{self._name}': Registered '{key}'")

    def get(self, key: Hashable) -> Optional[T]:
        return self._values.get(key)

    def get_metadata(self, key: Hashable) -> Optional[EntryMetadata]:
        return self._metadata.get(key)

    def is_registered(self, key: Hashable) -> bool:
        return key in self._values

    def unregister(self, key: Hashable) -> bool:
        """
        Unregister a key.

        Returns:
            True if unregistered, False if not found
        """
        if key not in self._values:
            return False
        del self._values[key]
        del self._metadata[key]
        Log.debug(f"KeyedRegistry '{self._name}': Unregistered '{key}'")
        return True

    def list_all(self) -> List[Tuple[Hashable, T, EntryMetadata]]:
        """List (key, value, metadata) tuples in registration order."""
        return [(key, value, self._metadata[key]) for key, value in self._values.items()]

    def list_keys(self) -> List[Hashable]:
        return list(self._values.keys())

    def as_dict(self) -> Dict[Hashable, T]:
        """Copy of the key -> value mapping."""
        return dict(self._values)

    def get_by_tag(self, tag: str) -> List[Tuple[Hashable, T, EntryMetadata]]:
        return [entry for entry in self.list_all() if tag in entry[2].tags]

    def clear(self) -> None:
        self._values.clear()
        self._metadata.clear()
        Log.debug(f"KeyedRegistry '{self._name}': Cleared all registrations")

    def count(self) -> int:
        return len(self._values)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

"""In-memory association state.

Each record keeps one association object per declared association. It holds
the loaded (and freshly built) children and remembers children taken out of
the association until the owner's next save removes them from storage.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from nested_params.core.enums import Removal
from nested_params.mapping.plan import AssociationSpec

if TYPE_CHECKING:
    from nested_params.record.base import Record


class _Association:
    def __init__(self, owner: Record, spec: AssociationSpec) -> None:
        self.owner = owner
        self.spec = spec
        # A new owner has nothing stored to load.
        self.loaded = owner.new_record
        self.removed: list[tuple[Record, Removal]] = []

    def _instantiate(self, attributes: Mapping[str, Any] | None) -> Record:
        child = self.spec.target_class()
        child._repository = self.owner._repository
        if attributes:
            child.assign_attributes(attributes)
        return child

    def _check_record(self, value: Any) -> Record:
        if not isinstance(value, self.spec.target_class):
            raise TypeError(
                f"{self.spec.name} expects {self.spec.target_class.__name__}, "
                f"got {type(value).__name__}"
            )
        return value

    def _load(self) -> list[Record]:
        repository = self.owner._repository
        if self.owner.new_record or repository is None:
            return []
        return repository.load_association(self.owner, self.spec)

    def take_removed(self) -> list[tuple[Record, Removal]]:
        """Hand the pending removals to the caller and forget them."""
        removed, self.removed = self.removed, []
        return removed


class CollectionAssociation(_Association):
    """List-like view over the children of a many association."""

    def __init__(self, owner: Record, spec: AssociationSpec) -> None:
        super().__init__(owner, spec)
        self._target: list[Record] = []

    @property
    def target(self) -> list[Record]:
        if not self.loaded:
            # Children built before the first load stay at the end.
            self._target = self._load() + self._target
            self.loaded = True
        return self._target

    def build(self, attributes: Mapping[str, Any] | None = None) -> Record:
        """Instantiate a new child and append it to the collection."""
        child = self._instantiate(attributes)
        self.target.append(child)
        return child

    def remove(self, child: Record, removal: Removal) -> None:
        target = self.target
        for index, candidate in enumerate(target):
            if candidate is child:
                del target[index]
                break
        if not child.new_record:
            self.removed.append((child, removal))

    def replace(self, records: Iterable[Any]) -> None:
        """Direct setter: the collection becomes exactly *records*."""
        incoming = [self._check_record(record) for record in records]
        for child in list(self.target):
            if not any(child is record for record in incoming):
                self.remove(child, Removal.UNLINK)
        self._target = incoming

    def __iter__(self) -> Iterator[Record]:
        return iter(self.target)

    def __len__(self) -> int:
        return len(self.target)

    def __getitem__(self, index: int) -> Record:
        return self.target[index]

    def __repr__(self) -> str:
        return f"<{self.spec.name}: {self.target!r}>"


class SingularAssociation(_Association):
    """Holder for the child of a one association."""

    def __init__(self, owner: Record, spec: AssociationSpec) -> None:
        super().__init__(owner, spec)
        self._target: Record | None = None

    @property
    def target(self) -> Record | None:
        if not self.loaded:
            if self._target is None:
                children = self._load()
                self._target = children[0] if children else None
            self.loaded = True
        return self._target

    def build(self, attributes: Mapping[str, Any] | None = None) -> Record:
        """Instantiate a new child, replacing the current one."""
        child = self._instantiate(attributes)
        self.replace(child)
        return child

    def replace(self, record: Any) -> None:
        """Direct setter: *record* (or None) becomes the child."""
        if record is not None:
            self._check_record(record)
        current = self.target
        if current is not None and current is not record and not current.new_record:
            self.removed.append((current, Removal.UNLINK))
        self._target = record

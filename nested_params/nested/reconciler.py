"""Nested-attributes reconciliation.

Turns an incoming collection of attribute sets into create / update /
destroy decisions against an association's current children.

A keyed mapping is planned first (pure, may raise) and only then applied,
so a stale or forged key leaves the association untouched::

    {"3": {"name": "Buy food"}, "new_1700000000": {"name": "Take out"}}

updates child 3 in place and builds one new child. A list of mappings
always builds new children.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from nested_params.core.enums import Removal
from nested_params.core.exceptions import ReconciliationError, UnknownChildError
from nested_params.mapping.plan import AssociationSpec
from nested_params.mapping.protocol import Entity
from nested_params.nested.keys import NEW_RECORD_PREFIX, Existing, New, all_blank, parse_key

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationPlan:
    """Decisions for one (current children, incoming collection) pair."""

    destroy: tuple[Entity, ...] = ()
    update: tuple[tuple[Entity, Mapping[str, Any]], ...] = ()
    build: tuple[Mapping[str, Any], ...] = ()

    @property
    def empty(self) -> bool:
        return not (self.destroy or self.update or self.build)


def _attribute_set(association: str, key: Any, value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ReconciliationError(
            f"Attributes for key '{key}' in '{association}' must be a mapping, "
            f"got {type(value).__name__}"
        )
    return value


def plan_reconciliation(
    current: Sequence[Entity],
    incoming: Mapping[Any, Any] | Sequence[Mapping[str, Any]],
    spec: AssociationSpec,
    prefix: str = NEW_RECORD_PREFIX,
) -> ReconciliationPlan:
    """Compute the plan for a many association without touching anything.

    Raises:
        UnknownChildError: A non-marker key matches no current child.
        ReconciliationError: An entry is not a mapping.
    """
    if not isinstance(incoming, Mapping):
        # Ordered form: every entry is a new record.
        candidates = [
            _attribute_set(spec.name, index, value) for index, value in enumerate(incoming)
        ]
        if spec.reject_empty:
            candidates = [attributes for attributes in candidates if not all_blank(attributes)]
        return ReconciliationPlan(build=tuple(candidates))

    entries = [
        (parse_key(key, prefix), _attribute_set(spec.name, key, value))
        for key, value in incoming.items()
    ]
    existing_ids = {key.id for key, _ in entries if isinstance(key, Existing)}

    destroy: list[Entity] = []
    by_id: dict[str, Entity] = {}
    for child in current:
        identity = None if child.new_record else str(child.id)
        if spec.destroy_missing and identity not in existing_ids:
            destroy.append(child)
        elif identity is not None:
            by_id[identity] = child

    update: list[tuple[Entity, Mapping[str, Any]]] = []
    new_entries: list[tuple[str, Mapping[str, Any]]] = []
    for key, attributes in entries:
        if isinstance(key, New):
            if spec.reject_empty and all_blank(attributes):
                continue
            new_entries.append((key.marker, attributes))
            continue
        child = by_id.get(key.id)
        if child is None:
            raise UnknownChildError(spec.name, key.id)
        update.append((child, attributes))

    new_entries.sort(key=lambda entry: entry[0])
    return ReconciliationPlan(
        destroy=tuple(destroy),
        update=tuple(update),
        build=tuple(attributes for _, attributes in new_entries),
    )


class ChildReconciler:
    """Applies nested attributes to an owner's association, in place."""

    def __init__(self, prefix: str = NEW_RECORD_PREFIX) -> None:
        self.prefix = prefix

    def assign(self, owner: Any, spec: AssociationSpec, value: Any) -> None:
        """Route *value* to reconciliation or to the association's direct setter."""
        if not spec.nested_params:
            owner.set_association(spec, value)
            return
        if spec.many:
            self._assign_many(owner, spec, value)
        else:
            self._assign_one(owner, spec, value)

    def _assign_many(self, owner: Any, spec: AssociationSpec, value: Any) -> None:
        is_ordered = isinstance(value, (list, tuple)) and all(
            isinstance(entry, Mapping) for entry in value
        )
        if not (isinstance(value, Mapping) or is_ordered):
            owner.set_association(spec, value)
            return

        association = owner.association(spec.name)
        plan = plan_reconciliation(association.target, value, spec, self.prefix)
        log.debug(
            "%s.%s: destroy=%d update=%d build=%d",
            type(owner).__name__,
            spec.name,
            len(plan.destroy),
            len(plan.update),
            len(plan.build),
        )
        self.apply(association, plan)

    def _assign_one(self, owner: Any, spec: AssociationSpec, value: Any) -> None:
        if not isinstance(value, Mapping):
            owner.set_association(spec, value)
            return
        association = owner.association(spec.name)
        child = association.target
        if child is None:
            child = association.build()
        child.assign_attributes(value)

    @staticmethod
    def apply(association: Any, plan: ReconciliationPlan) -> None:
        """Carry out *plan* on a collection association."""
        for child in plan.destroy:
            association.remove(child, Removal.DESTROY)
            if not child.new_record:
                log.info("%s %s marked for destruction", association.spec.name, child.id)
        for child, attributes in plan.update:
            child.assign_attributes(attributes)
        for attributes in plan.build:
            association.build(attributes)

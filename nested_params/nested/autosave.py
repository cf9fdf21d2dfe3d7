"""Persist an owner's autosave children after the owner's own row.

Runs inside the save transaction opened by the repository. Children are
written without re-running their validations: they were already checked
as part of the owner's validation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nested_params.core.enums import Removal
from nested_params.core.transaction import TransactionManager

if TYPE_CHECKING:
    from nested_params.repository.base import Repository

log = logging.getLogger(__name__)


class AutosaveCoordinator:
    """Writes removals and children of every touched autosave association."""

    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    def save_associations(self, owner: Any, tx: TransactionManager) -> None:
        for association in owner.touched_associations():
            spec = association.spec
            if not spec.autosave:
                continue
            self._flush_removed(association, tx)
            if not association.loaded:
                continue
            if spec.many:
                children = list(association.target)
            else:
                child = association.target
                children = [child] if child is not None else []
            for child in children:
                child.write_attribute(spec.foreign_key, owner.id)
                self._repository.persist(child, tx)

    def _flush_removed(self, association: Any, tx: TransactionManager) -> None:
        removed = association.take_removed()
        if not removed:
            return
        # A rolled back save must leave the removals pending for the next attempt.
        tx.on_rollback(lambda: association.removed.extend(removed))
        for child, removal in removed:
            if removal is Removal.DESTROY:
                self._repository.delete_row(child, tx)
                log.info("destroyed %s %s", type(child).__name__, child.id)
            else:
                child.write_attribute(association.spec.foreign_key, None)
                self._repository.persist(child, tx)

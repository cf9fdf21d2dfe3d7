"""Copy child validation errors onto the parent."""

from __future__ import annotations

from collections.abc import Iterable

from nested_params.mapping.protocol import Entity


def aggregate_child_errors(
    parent: Entity,
    children: Iterable[Entity],
    namespace: str | None,
) -> None:
    """Validate *children* and merge their errors into ``parent.errors``.

    With a *namespace* each child field ``f`` is reported as
    ``f"{namespace}_{f}"`` and only the first message per key is kept, so two
    tasks both missing a name give a single ``tasks_name`` error. Without a
    namespace (one-cardinality associations) field names are reused as is.
    """
    for child in children:
        if child.is_valid():
            continue
        for field, message in child.errors.items():
            if namespace is None:
                parent.errors.add(field, message)
                continue
            key = f"{namespace}_{field}"
            if key not in parent.errors:
                parent.errors.add(key, message)

"""Per-record validation error container."""

from __future__ import annotations

from collections.abc import Iterator


class Errors:
    """Ordered mapping of field name to validation messages."""

    def __init__(self) -> None:
        self._messages: dict[str, list[str]] = {}

    def add(self, field: str, message: str) -> None:
        self._messages.setdefault(field, []).append(message)

    def on(self, field: str) -> str | None:
        """First message registered for *field*, or None."""
        messages = self._messages.get(field)
        return messages[0] if messages else None

    def messages_for(self, field: str) -> list[str]:
        return list(self._messages.get(field, []))

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield every ``(field, message)`` pair in insertion order."""
        for field, messages in self._messages.items():
            for message in messages:
                yield field, message

    def full_messages(self) -> list[str]:
        return [
            f"{field.replace('_', ' ').capitalize()} {message}" for field, message in self.items()
        ]

    def clear(self) -> None:
        self._messages.clear()

    def as_dict(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self._messages.items()}

    def __contains__(self, field: object) -> bool:
        return field in self._messages

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __repr__(self) -> str:
        return f"Errors({self._messages!r})"

"""Unit tests for errors, validators and the exception hierarchy."""

from __future__ import annotations

import pytest

from nested_params.core.exceptions import (
    NestedParamsError,
    PersistenceError,
    ReconciliationError,
    RecordInvalid,
    RecordNotSaved,
    UnknownChildError,
)
from nested_params.record.errors import Errors
from nested_params.record.validations import length_of
from tests.models import Color, Project


class TestErrors:
    def test_add_and_on(self) -> None:
        errors = Errors()
        errors.add("name", "can't be blank")
        errors.add("name", "is too short")
        assert errors.on("name") == "can't be blank"
        assert errors.messages_for("name") == ["can't be blank", "is too short"]
        assert errors.on("email") is None
        assert len(errors) == 2

    def test_items_in_insertion_order(self) -> None:
        errors = Errors()
        errors.add("b", "x")
        errors.add("a", "y")
        assert list(errors.items()) == [("b", "x"), ("a", "y")]

    def test_full_messages(self) -> None:
        errors = Errors()
        errors.add("tasks_name", "can't be blank")
        assert errors.full_messages() == ["Tasks name can't be blank"]

    def test_clear(self) -> None:
        errors = Errors()
        errors.add("name", "x")
        errors.clear()
        assert not errors
        assert errors.as_dict() == {}


class TestLengthOf:
    def test_bounds(self) -> None:
        check = length_of("name", minimum=2, maximum=4)
        color = Color(name="r")
        check(color)
        color.name = "purple"
        check(color)
        assert color.errors.messages_for("name") == [
            "is too short (minimum is 2 characters)",
            "is too long (maximum is 4 characters)",
        ]

    def test_allow_blank(self) -> None:
        color = Color(name="")
        length_of("name", minimum=2, allow_blank=True)(color)
        assert not color.errors


class TestExceptions:
    def test_hierarchy(self) -> None:
        assert issubclass(UnknownChildError, ReconciliationError)
        assert issubclass(RecordNotSaved, PersistenceError)
        assert issubclass(RecordInvalid, NestedParamsError)

    def test_record_invalid_lists_messages(self) -> None:
        project = Project()
        project.is_valid()
        error = RecordInvalid(project)
        assert error.record is project
        assert str(error) == "Validation failed for Project: Name can't be blank"

    def test_catchable_as_base(self) -> None:
        with pytest.raises(NestedParamsError):
            raise UnknownChildError("tasks", "7")

"""Unit tests for the schema builder."""

from __future__ import annotations

import pytest

from nested_params.core.enums import Cardinality
from nested_params.core.exceptions import SchemaCompilationError
from nested_params.mapping.builder import schema
from nested_params.record.base import Record


def _models() -> tuple[type[Record], type[Record]]:
    class Line(Record):
        pass

    class Invoice(Record):
        pass

    schema(Line).fields("amount", "invoice_id").build()
    return Invoice, Line


class TestModelSchemaBuilder:
    def test_defaults(self) -> None:
        invoice, line = _models()
        compiled = schema(invoice).fields("number").has_many("lines", line).build()

        assert compiled.table == "invoices"
        assert compiled.key_field == "id"
        assert compiled.fields == ("number",)
        spec = compiled.associations["lines"]
        assert spec.cardinality is Cardinality.MANY
        assert spec.foreign_key == "invoice_id"
        assert spec.autosave is False

    def test_build_binds_schema(self) -> None:
        invoice, _ = _models()
        compiled = schema(invoice, table="bills").fields("number").build()
        assert invoice.__schema__ is compiled
        assert invoice.schema() is compiled

    def test_nested_params_implies_autosave(self) -> None:
        invoice, line = _models()
        compiled = schema(invoice).has_many("lines", line, nested_params=True).build()
        assert compiled.associations["lines"].autosave is True
        assert compiled.autosave_associations == [compiled.associations["lines"]]

    def test_attributes_alias_lookup(self) -> None:
        invoice, line = _models()
        compiled = schema(invoice).has_many("lines", line).build()
        assert compiled.association("lines_attributes") is compiled.associations["lines"]
        assert compiled.association("other") is None

    def test_error_namespace(self) -> None:
        invoice, line = _models()
        compiled = (
            schema(invoice)
            .has_many("lines", line)
            .has_one("first_line", line)
            .build()
        )
        assert compiled.associations["lines"].error_namespace == "lines"
        assert compiled.associations["first_line"].error_namespace is None

    def test_unknown_foreign_key_rejected(self) -> None:
        invoice, line = _models()
        with pytest.raises(SchemaCompilationError, match="bill_id"):
            schema(invoice).has_many("lines", line, foreign_key="bill_id").build()

    def test_invalid_identifier_rejected(self) -> None:
        invoice, _ = _models()
        with pytest.raises(SchemaCompilationError, match="Invalid field"):
            schema(invoice).fields("drop table").build()

    def test_duplicate_field_rejected(self) -> None:
        invoice, _ = _models()
        with pytest.raises(SchemaCompilationError, match="Duplicate"):
            schema(invoice).fields("number", "number").build()

    def test_key_as_field_rejected(self) -> None:
        invoice, _ = _models()
        with pytest.raises(SchemaCompilationError, match="Key field"):
            schema(invoice).fields("id").build()

    def test_association_clash_rejected(self) -> None:
        invoice, line = _models()
        with pytest.raises(SchemaCompilationError, match="clashes"):
            schema(invoice).fields("lines").has_many("lines", line).build()

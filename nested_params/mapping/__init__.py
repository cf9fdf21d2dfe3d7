"""Mapping layer - model schemas and row-to-record mapping."""

from __future__ import annotations

from nested_params.mapping.builder import ModelSchemaBuilder, schema
from nested_params.mapping.model import RecordMapper
from nested_params.mapping.plan import AssociationSpec, ModelSchema
from nested_params.mapping.protocol import Entity

__all__ = [
    "schema",
    "ModelSchemaBuilder",
    "ModelSchema",
    "AssociationSpec",
    "RecordMapper",
    "Entity",
]

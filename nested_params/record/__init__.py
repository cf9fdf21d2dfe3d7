"""Records, their associations, errors and validators."""

from __future__ import annotations

from nested_params.record.associations import CollectionAssociation, SingularAssociation
from nested_params.record.base import Record
from nested_params.record.errors import Errors
from nested_params.record.validations import length_of, presence_of

__all__ = [
    "Record",
    "Errors",
    "CollectionAssociation",
    "SingularAssociation",
    "presence_of",
    "length_of",
]

"""Unit tests for nested form field naming."""

from __future__ import annotations

import pytest

from nested_params.mapping.model import RecordMapper
from nested_params.nested.form import NestedFieldNamer
from tests.models import Artist, Member, Visitor


def _existing_artist(identity: int, name: str) -> Artist:
    return RecordMapper(Artist).map_one(
        {"id": identity, "name": name, "member_id": None, "visitor_id": None}
    )


class TestNestedFieldNamer:
    def test_existing_children_keyed_by_id(self) -> None:
        visitor = Visitor(artists=[_existing_artist(1, "paco"), _existing_artist(2, "poncho")])
        namer = NestedFieldNamer(visitor)
        names = [namer.field_name("artists", "name", artist) for artist in visitor.artists]
        assert names == [
            "visitor[artists_attributes][1][name]",
            "visitor[artists_attributes][2][name]",
        ]

    def test_new_children_get_counter_markers(self) -> None:
        visitor = Visitor(artists=[{"name": "paco"}, {"name": "poncho"}])
        namer = NestedFieldNamer(visitor)
        assert [key for key, _ in namer.children("artists")] == ["new_000001", "new_000002"]
        # Markers are stable for the same child.
        assert namer.key_for(visitor.artists[0]) == "new_000001"

    def test_existing_and_new(self) -> None:
        visitor = Visitor(artists=[_existing_artist(1, "paco")])
        visitor.artists.build({"name": "poncho"})
        namer = NestedFieldNamer(visitor)
        assert [key for key, _ in namer.children("artists")] == ["1", "new_000001"]

    def test_one_association(self) -> None:
        member = Member(artist={"name": "Paco"})
        namer = NestedFieldNamer(member)
        assert namer.field_name("artist", "name") == "member[artist_attributes][name]"
        assert namer.field_id("artist", "name") == "member_artist_attributes_name"

    def test_custom_object_name(self) -> None:
        member = Member(artist={"name": "Paco"})
        namer = NestedFieldNamer(member, object_name="account")
        assert namer.field_name("artist_attributes", "name") == "account[artist_attributes][name]"

    def test_many_requires_child(self) -> None:
        namer = NestedFieldNamer(Visitor())
        with pytest.raises(ValueError):
            namer.field_name("artists", "name")

    def test_unknown_association(self) -> None:
        with pytest.raises(KeyError):
            NestedFieldNamer(Visitor()).children("colors")

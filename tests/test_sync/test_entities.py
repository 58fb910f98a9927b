"""Tests for the entity kind registry."""

import pytest

from rindang.sync.entities import ENTITY_REGISTRY, EntityKind, spec_for


class TestEntityKind:
    def test_parse_string(self):
        assert EntityKind.parse("productions") is EntityKind.PRODUCTIONS

    def test_parse_is_case_insensitive(self):
        assert EntityKind.parse(" Lands ") is EntityKind.LANDS

    def test_parse_passthrough(self):
        assert EntityKind.parse(EntityKind.ACTIVITIES) is EntityKind.ACTIVITIES

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown entity kind"):
            EntityKind.parse("user_profiles")

    def test_value_is_string(self):
        assert EntityKind.LANDS == "lands"


class TestRegistry:
    def test_every_kind_registered(self):
        assert set(ENTITY_REGISTRY) == set(EntityKind)

    def test_spec_for(self):
        spec = spec_for("productions")
        assert spec.remote_table == "productions"
        assert spec.local_table == "productions"
        assert "land_id" in spec.index_fields

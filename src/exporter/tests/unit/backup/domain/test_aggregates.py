"""Unit tests for backup domain aggregates."""

from uuid import uuid4

import pytest

from backup.domain.aggregates import Group, Track, User
from backup.domain.value_objects import InvalidNameError, Node


class TestGroup:
    """Tests for the Group aggregate."""

    def test_create_normalizes_name(self):
        assert Group.create("Admin").name == "admin"

    def test_create_rejects_invalid_name(self):
        with pytest.raises(InvalidNameError):
            Group.create("not valid")

    def test_create_with_weight_adds_weight_node(self):
        group = Group.create("admin", weight=10)
        assert group.weight == 10
        assert Node.weight_node(10) in group.nodes

    def test_weight_absent(self):
        assert Group.create("admin").weight is None

    def test_highest_weight_wins(self):
        group = Group.create(
            "admin", nodes=[Node.weight_node(5), Node.weight_node(20)]
        )
        assert group.weight == 20

    def test_negated_weight_node_ignored(self):
        group = Group.create("admin", nodes=[Node(key="weight.50", value=False)])
        assert group.weight is None

    def test_is_default(self):
        assert Group.create("default").is_default
        assert not Group.create("admin").is_default

    def test_add_node_keeps_order(self):
        group = Group.create("admin")
        group.add_node(Node(key="b"))
        group.add_node(Node(key="a"))
        assert [n.key for n in group.nodes] == ["b", "a"]


class TestTrack:
    """Tests for the Track aggregate."""

    def test_create_normalizes_name_and_groups(self):
        track = Track.create("Staff", groups=["Default", "MOD"])
        assert track.name == "staff"
        assert track.groups == ["default", "mod"]

    def test_create_rejects_invalid_name(self):
        with pytest.raises(InvalidNameError):
            Track.create("x" * 37)

    def test_empty_track(self):
        assert len(Track.create("empty")) == 0

    def test_append_rejects_duplicate_group(self):
        track = Track.create("staff", groups=["mod"])
        with pytest.raises(ValueError):
            track.append("MOD")


class TestUser:
    """Tests for the User aggregate."""

    def test_primary_group_defaults_to_default(self):
        assert User(uuid=uuid4()).primary_group_or_default == "default"

    def test_primary_group_lower_cased(self):
        user = User(uuid=uuid4(), primary_group="Admin")
        assert user.primary_group_or_default == "admin"

    def test_identity_equality(self):
        uuid = uuid4()
        assert User(uuid=uuid, username="a") == User(uuid=uuid, username="b")
        assert len({User(uuid=uuid), User(uuid=uuid)}) == 1

    def test_str_with_unknown_username(self):
        assert "unknown username" in str(User(uuid=uuid4()))

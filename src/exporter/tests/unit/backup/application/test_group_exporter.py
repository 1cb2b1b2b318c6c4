"""Unit tests for the group and track exporters."""

import io

import pytest

from backup.application.group_exporter import (
    GroupExporter,
    TrackExporter,
    sort_groups,
)
from backup.application.progress import ProgressReporter
from backup.application.sink import SerializingSink
from backup.domain.aggregates import Group, Track
from backup.domain.value_objects import Node
from backup.infrastructure.managers import GroupManager, TrackManager


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def sink(stream, mock_probe):
    return SerializingSink(stream, probe=mock_probe)


@pytest.fixture
def reporter(observer, mock_probe):
    reporter = ProgressReporter(probe=mock_probe)
    reporter.add_listener(observer)
    return reporter


class TestSortGroups:
    """Tests for group ordering."""

    def test_weight_descending(self, sample_groups):
        assert [g.name for g in sort_groups(sample_groups)] == [
            "admin",
            "mod",
            "default",
        ]

    def test_missing_weight_counts_as_zero(self):
        groups = [
            Group.create("zeta"),
            Group.create("alpha", weight=0),
            Group.create("neg", weight=-1),
            Group.create("top", weight=1),
        ]
        assert [g.name for g in sort_groups(groups)] == ["top", "alpha", "zeta", "neg"]

    def test_ties_broken_by_name_case_insensitively(self):
        groups = [
            Group(name="Beta", nodes=[Node.weight_node(5)]),
            Group(name="alpha", nodes=[Node.weight_node(5)]),
            Group(name="Gamma", nodes=[Node.weight_node(5)]),
        ]
        assert [g.name for g in sort_groups(groups)] == ["alpha", "Beta", "Gamma"]


class TestGroupExporter:
    """Tests for GroupExporter.export()."""

    @pytest.mark.asyncio
    async def test_group_section(self, sample_groups, sink, stream, reporter, mock_probe):
        exporter = GroupExporter(GroupManager(sample_groups), sink, reporter, mock_probe)

        result = await exporter.export()

        assert result.count == 3
        assert stream.getvalue().splitlines() == [
            "# Create groups",
            "/lp creategroup admin",
            "/lp creategroup mod",
            "",
            "# Export group: admin",
            "/lp group admin permission set essentials.ban true",
            "/lp group admin parent add mod",
            "/lp group admin permission set weight.10 true",
            "",
            "# Export group: mod",
            "/lp group mod permission set essentials.kick true",
            "/lp group mod parent add default",
            "/lp group mod permission set weight.5 true",
            "",
            "# Export group: default",
            "/lp group default permission set essentials.spawn true",
            "/lp group default permission set weight.0 true",
            "",
            "",
            "",
        ]

    @pytest.mark.asyncio
    async def test_default_group_never_created(self, sink, stream, reporter, mock_probe):
        groups = [Group.create("default", nodes=[Node(key="a.b")])]
        await GroupExporter(GroupManager(groups), sink, reporter, mock_probe).export()

        output = stream.getvalue()
        assert "creategroup default" not in output
        assert "/lp group default permission set a.b true" in output

    @pytest.mark.asyncio
    async def test_reports_progress_per_group(
        self, sample_groups, sink, reporter, observer, mock_probe
    ):
        await GroupExporter(GroupManager(sample_groups), sink, reporter, mock_probe).export()

        assert observer.messages == [
            "EXPORT > Starting group export.",
            "EXPORT > Exported 1 groups so far.",
            "EXPORT > Exported 2 groups so far.",
            "EXPORT > Exported 3 groups so far.",
            "EXPORT > Exported 3 groups.",
        ]
        mock_probe.stage_completed.assert_called_once_with("groups", 3)

    @pytest.mark.asyncio
    async def test_no_groups(self, sink, stream, reporter, mock_probe):
        result = await GroupExporter(GroupManager(), sink, reporter, mock_probe).export()

        assert result.count == 0
        assert stream.getvalue() == "# Create groups\n\n\n"


class TestTrackExporter:
    """Tests for TrackExporter.export()."""

    @pytest.mark.asyncio
    async def test_track_section(self, sample_tracks, sink, stream, reporter, mock_probe):
        result = await TrackExporter(
            TrackManager(sample_tracks), sink, reporter, mock_probe
        ).export()

        assert result.count == 1
        assert stream.getvalue().splitlines() == [
            "# Create tracks",
            "/lp createtrack staff",
            "",
            "# Export track: staff",
            "/lp track staff append default",
            "/lp track staff append mod",
            "/lp track staff append admin",
            "",
            "",
            "",
        ]

    @pytest.mark.asyncio
    async def test_member_order_is_preserved(self, sink, stream, reporter, mock_probe):
        order = ["zeta", "alpha", "mid", "beta"]
        await TrackExporter(
            TrackManager([Track.create("path", groups=order)]), sink, reporter, mock_probe
        ).export()

        appended = [
            line.split()[-1]
            for line in stream.getvalue().splitlines()
            if " append " in line
        ]
        assert appended == order

    @pytest.mark.asyncio
    async def test_tracks_keep_enumeration_order(self, sink, stream, reporter, mock_probe):
        tracks = [Track.create("zeta"), Track.create("alpha")]
        await TrackExporter(TrackManager(tracks), sink, reporter, mock_probe).export()

        created = [
            line for line in stream.getvalue().splitlines() if "createtrack" in line
        ]
        assert created == ["/lp createtrack zeta", "/lp createtrack alpha"]

    @pytest.mark.asyncio
    async def test_empty_track_still_exported(self, sink, stream, reporter, mock_probe):
        await TrackExporter(
            TrackManager([Track.create("empty")]), sink, reporter, mock_probe
        ).export()

        assert "# Export track: empty\n\n" in stream.getvalue()

    @pytest.mark.asyncio
    async def test_no_tracks_writes_nothing(self, sink, stream, reporter, observer, mock_probe):
        result = await TrackExporter(TrackManager(), sink, reporter, mock_probe).export()

        assert result.count == 0
        assert stream.getvalue() == ""
        assert observer.messages[-1] == "EXPORT > Exported 0 tracks."

"""Tests for sysmonitor.models: probe enums, Snapshot and Report."""

from __future__ import annotations

import pydantic
import pytest

from sysmonitor.models import (
    FailureReason,
    LoadSample,
    ProbeFailure,
    ProbeName,
    Report,
    Row,
    Section,
    Snapshot,
    StaticIdentity,
    Table,
)


# ── ProbeName / FailureReason ─────────────────────────


class TestEnums:
    def test_probe_names_match_snapshot_fields(self):
        fields = set(Snapshot.model_fields)
        assert {n.value for n in ProbeName} <= fields

    def test_values_are_snake_case(self):
        for member in ProbeName:
            assert member.value == member.name.lower()
        for member in FailureReason:
            assert member.value == member.name.lower()


# ── ProbeFailure ──────────────────────────────────────


class TestProbeFailure:
    def test_frozen(self):
        failure = ProbeFailure(probe=ProbeName.LOAD, reason=FailureReason.TIMEOUT)
        with pytest.raises(pydantic.ValidationError):
            failure.detail = "changed"

    def test_serialization(self):
        failure = ProbeFailure(probe=ProbeName.CLOCK, reason=FailureReason.UNSUPPORTED, detail="x")
        assert failure.model_dump(mode="json") == {
            "probe": "clock",
            "reason": "unsupported",
            "detail": "x",
        }


# ── Snapshot ──────────────────────────────────────────


class TestSnapshot:
    def test_frozen(self, make_snapshot):
        snapshot = make_snapshot()
        with pytest.raises(pydantic.ValidationError):
            snapshot.load = LoadSample(overall=1.0, per_core=[1.0], average=(0.0, 0.0, 0.0))

    def test_failures_in_probe_order(self, make_snapshot, failure):
        snapshot = make_snapshot(
            external_ip=failure(ProbeName.EXTERNAL_IP),
            load=failure(ProbeName.LOAD, FailureReason.TRANSIENT),
        )
        assert [f.probe for f in snapshot.failures] == [ProbeName.LOAD, ProbeName.EXTERNAL_IP]
        assert not snapshot.empty

    def test_empty(self, make_snapshot, failure):
        snapshot = make_snapshot(**{n.value: failure(n) for n in ProbeName})
        assert snapshot.empty

    def test_json_round_trip_keeps_failures(self, make_snapshot, failure):
        snapshot = make_snapshot(cpu_temperature=failure(ProbeName.CPU_TEMPERATURE))
        restored = Snapshot.model_validate_json(snapshot.model_dump_json())
        assert isinstance(restored.cpu_temperature, ProbeFailure)
        assert restored.memory == snapshot.memory
        assert restored.filesystems == snapshot.filesystems

    def test_taken_at_is_utc(self, make_snapshot):
        assert make_snapshot().taken_at.utcoffset().total_seconds() == 0


# ── immutability of nested values ─────────────────────


class TestNestedImmutability:
    def test_nested_records_are_frozen(self, make_snapshot):
        snapshot = make_snapshot()
        with pytest.raises(pydantic.ValidationError):
            snapshot.processes.all = 999
        with pytest.raises(pydantic.ValidationError):
            snapshot.static_identity.cpu.cache.l2 = 0
        assert snapshot.processes.all == 312

    def test_sequences_are_tuples(self, make_snapshot):
        snapshot = make_snapshot()
        assert isinstance(snapshot.filesystems, tuple)
        assert isinstance(snapshot.load.per_core, tuple)
        assert isinstance(snapshot.static_identity.gpus, tuple)
        with pytest.raises(AttributeError):
            snapshot.filesystems.clear()

    def test_maps_are_read_only(self, make_snapshot):
        snapshot = make_snapshot(durations={"memory": 0.01})
        with pytest.raises(TypeError):
            snapshot.static_identity.versions["git"] = "9.9"
        with pytest.raises(TypeError):
            snapshot.durations["memory"] = 0.0
        assert snapshot.static_identity.versions["git"] == "2.34.1"

    def test_maps_serialize_as_objects(self, make_snapshot):
        data = make_snapshot(durations={"memory": 0.01}).model_dump(mode="json")
        assert data["durations"] == {"memory": 0.01}
        assert data["static_identity"]["versions"]["git"] == "2.34.1"

    def test_default_maps_are_read_only(self):
        with pytest.raises(TypeError):
            StaticIdentity().versions["git"] = "x"


# ── Report ────────────────────────────────────────────


class TestReport:
    def test_defaults(self):
        report = Report()
        assert report.title == "System Information"
        assert report.sections == []
        assert report.notice is None

    def test_section_lookup(self):
        report = Report(sections=[Section(title="Memory Usage"), Section(title="Versions")])
        assert report.section("Versions").title == "Versions"
        with pytest.raises(KeyError):
            report.section("GPU")

    def test_nested_rows(self):
        child = Table(rows=[Row(label="Model", values=["X"])])
        row = Row(label="1", children=child)
        dumped = Table(rows=[row]).model_dump()
        assert dumped["rows"][0]["children"]["rows"][0]["values"] == ["X"]

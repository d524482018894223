"""Tests for sync direction tracking and the sync gate."""

import pytest

from http_tool_sync.errors import SyncInFlightError, UnknownOriginError
from http_tool_sync.sync.models import SyncOrigin
from http_tool_sync.sync.origin import OriginTracker, SyncGate


class TestOriginTracker:
    def test_defaults_to_url(self):
        assert OriginTracker().current == SyncOrigin.URL

    def test_pointer_down_selects_fields(self):
        tracker = OriginTracker()
        tracker.pointer_down()
        assert tracker.current == SyncOrigin.FIELDS

    def test_pointer_leave_selects_url(self):
        tracker = OriginTracker(SyncOrigin.FIELDS)
        tracker.pointer_leave()
        assert tracker.current == SyncOrigin.URL

    def test_accepts_string_initial(self):
        assert OriginTracker("fields").current == SyncOrigin.FIELDS


class TestSyncGate:
    def test_starts_idle(self):
        gate = SyncGate()
        assert gate.idle
        assert gate.direction is None

    def test_holds_direction_inside_block(self):
        gate = SyncGate()
        with gate.enter("url") as direction:
            assert direction == SyncOrigin.URL
            assert gate.direction == SyncOrigin.URL
            assert not gate.idle
        assert gate.idle

    def test_same_direction_nests(self):
        gate = SyncGate()
        with gate.enter(SyncOrigin.FIELDS):
            with gate.enter(SyncOrigin.FIELDS):
                assert gate.direction == SyncOrigin.FIELDS
            assert gate.direction == SyncOrigin.FIELDS
        assert gate.idle

    def test_opposite_direction_is_refused(self):
        gate = SyncGate()
        with gate.enter(SyncOrigin.URL):
            with pytest.raises(SyncInFlightError):
                with gate.enter(SyncOrigin.FIELDS):
                    pass
            assert gate.direction == SyncOrigin.URL
        assert gate.idle

    def test_resets_after_exception(self):
        gate = SyncGate()
        with pytest.raises(KeyError):
            with gate.enter(SyncOrigin.URL):
                raise KeyError("boom")
        assert gate.idle

    def test_unknown_origin(self):
        gate = SyncGate()
        with pytest.raises(UnknownOriginError) as exc_info:
            with gate.enter("sideways"):
                pass
        assert exc_info.value.origin == "sideways"
        assert gate.idle

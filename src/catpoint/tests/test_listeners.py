"""
Tests for the built-in status listeners
"""

import logging

import pytest

from catpoint.domain.enums import AlarmStatus, ArmingStatus
from catpoint.services.listeners import EventLogListener, LoggingStatusListener


# =============================================================================
# LoggingStatusListener
# =============================================================================

class TestLoggingStatusListener:

    @pytest.fixture
    def records(self, caplog):
        caplog.set_level(logging.DEBUG, logger="catpoint.events")
        return caplog

    def test_alarm_logged_as_warning(self, records):
        LoggingStatusListener().notify(AlarmStatus.ALARM)

        assert [(r.name, r.levelno) for r in records.records] == [("catpoint.events", logging.WARNING)]
        assert "Awooga!" in records.records[0].getMessage()

    @pytest.mark.parametrize("status", [AlarmStatus.NO_ALARM, AlarmStatus.PENDING_ALARM])
    def test_other_alarm_statuses_logged_as_info(self, records, status):
        LoggingStatusListener().notify(status)

        assert [r.levelno for r in records.records] == [logging.INFO]
        assert status.value in records.records[0].getMessage()

    def test_other_kinds(self, records):
        listener = LoggingStatusListener()

        listener.cat_detected(True)
        listener.arming_status_changed(ArmingStatus.ARMED_AWAY)
        listener.sensor_status_changed()

        assert [r.levelno for r in records.records] == [logging.INFO, logging.INFO, logging.DEBUG]
        assert "cat detected" in records.records[0].getMessage()
        assert "Armed - Away" in records.records[1].getMessage()

    def test_custom_logger(self, caplog):
        caplog.set_level(logging.INFO, logger="site.alarm")

        LoggingStatusListener(logging.getLogger("site.alarm")).notify(AlarmStatus.NO_ALARM)

        assert [r.name for r in caplog.records] == ["site.alarm"]


# =============================================================================
# EventLogListener
# =============================================================================

class TestEventLogListener:

    def test_bounded_newest_last(self):
        event_log = EventLogListener(max_events=2)

        event_log.notify(AlarmStatus.PENDING_ALARM)
        event_log.cat_detected(False)
        event_log.arming_status_changed(ArmingStatus.ARMED_HOME)

        assert [e["type"] for e in event_log.get_events()] == ["cat_detected", "arming_status"]
        assert event_log.get_events(limit=1)[0]["arming_status"] == "armed_home"
        assert event_log.get_events(limit=0) == []

    def test_clear(self):
        event_log = EventLogListener()
        event_log.sensor_status_changed()

        event_log.clear()

        assert event_log.get_events() == []

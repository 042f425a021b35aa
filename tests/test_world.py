from datetime import datetime, timedelta, timezone

import pytest

from aircap.airport.models import Airport, Runway
from aircap.errors import ConfigurationError, UnknownRunwayError
from aircap.events.core import EventType
from aircap.simulation.world import World


T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _world(days=1):
	airport = Airport("Test", [Runway("A", 90, timedelta(seconds=60)), Runway("B", 180, timedelta(seconds=90))])
	return World(airport, T0, T0 + timedelta(days=days))


def test_initial_state():
	w = _world()
	assert not w.get_curfew_active()
	assert w.get_rotation_multiplier() == 1.0
	assert w.get_gate_capacity_constraint() == 0.0
	assert w.get_taxi_time_overhead() == timedelta(0)
	assert set(w.get_active_runway_configuration()) == {"A", "B"}
	assert w.get_runway_ids() == ["A", "B"]
	assert w.get_event_queue_length() == 0


def test_end_must_follow_start():
	airport = Airport("Test", [Runway("A", 90, timedelta(seconds=60))])
	with pytest.raises(ConfigurationError):
		World(airport, T0, T0)


def test_unknown_runway_raises():
	w = _world()
	with pytest.raises(UnknownRunwayError) as exc:
		w.set_runway_available("Z", False)
	assert exc.value.runway_id == "Z"
	assert "runway Z not found" in str(exc.value)
	with pytest.raises(UnknownRunwayError):
		w.get_runway_available("Z")
	assert w.runway("Z") is None


def test_negative_modifiers_rejected():
	w = _world()
	with pytest.raises(ConfigurationError):
		w.set_gate_capacity_constraint(-1.0)
	with pytest.raises(ConfigurationError):
		w.set_taxi_time_overhead(timedelta(seconds=-1))
	with pytest.raises(ConfigurationError):
		w.set_wind(-5, 90)


def test_availability_notification_schedules_configuration_change():
	w = _world()
	ts = T0 + timedelta(hours=2)
	w.set_runway_available("A", False)
	w.notify_runway_availability_change("A", False, ts)
	assert w.available_runways() == [w.runway("B")]
	evt = w.events.pop()
	assert evt.type == EventType.ACTIVE_RUNWAY_CONFIGURATION_CHANGED
	assert evt.time == ts
	assert set(evt.configuration) == {"B"}


def test_curfew_notification_schedules_empty_configuration():
	w = _world()
	w.set_curfew_active(True)
	w.notify_curfew_change(True, T0)
	evt = w.events.pop()
	assert evt.configuration == {}


def test_set_wind_normalizes_and_schedules_change():
	w = _world()
	w.current_time = T0 + timedelta(hours=3)
	w.set_wind(10, -90)
	assert w.wind_direction == 270
	evt = w.events.pop()
	assert evt.type == EventType.ACTIVE_RUNWAY_CONFIGURATION_CHANGED
	assert evt.time == T0 + timedelta(hours=3)


def test_active_configuration_is_copied_both_ways():
	w = _world()
	config = w.get_active_runway_configuration()
	config.pop("A")
	assert set(w.get_active_runway_configuration()) == {"A", "B"}
	w.set_active_runway_configuration(config)
	config.clear()
	assert set(w.get_active_runway_configuration()) == {"B"}

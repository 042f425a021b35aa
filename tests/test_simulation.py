import threading
from datetime import datetime, timedelta, timezone

import pytest

from aircap.airport.compatibility import RunwayCompatibility
from aircap.airport.models import Airport, Runway
from aircap.config import Config
from aircap.errors import ConfigurationError, UnknownRunwayError
from aircap.events.events import RotationChangeEvent
from aircap.orchestrator.sim import Simulation
from aircap.policies.core import Policy
from aircap.policies.policies import (
	IntelligentMaintenanceSchedule,
	MaintenanceSchedule,
	RotationStrategy,
	WindChange,
)


T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _airport():
	return Airport(
		"Pair",
		[Runway("A", 90, timedelta(seconds=60)), Runway("B", 180, timedelta(seconds=90))],
		RunwayCompatibility({"A": ["B"], "B": ["A"]}),
	)


class FailingPolicy(Policy):
	def __init__(self, name, exc):
		super().__init__(name)
		self.exc = exc

	def generate_events(self, world):
		raise self.exc


class SlowPolicy(Policy):
	def __init__(self):
		super().__init__("SlowPolicy")
		self.finished = threading.Event()

	def generate_events(self, world):
		for h in range(24):
			self.schedule(world, RotationChangeEvent(1.0, world.get_start_time() + timedelta(hours=h)))
		self.finished.set()


def test_invalid_airport_rejected_up_front():
	airport = Airport("Broken", [Runway("A", 90, timedelta(seconds=60))], RunwayCompatibility({"A": ["Z"]}))
	with pytest.raises(ConfigurationError):
		Simulation(airport)


def test_policy_parameters_validated_when_added():
	sim = Simulation(_airport(), Config(start_time=T0, simulation_days=1))
	with pytest.raises(ConfigurationError):
		sim.add_curfew_policy(T0 + timedelta(hours=6), T0)
	with pytest.raises(ConfigurationError):
		sim.add_wind_policy(-3, 0)
	assert sim.policies == []


def test_curfew_limit_follows_config():
	sim = Simulation(_airport(), Config(start_time=T0, simulation_days=10, max_curfew_days=2))
	with pytest.raises(ConfigurationError):
		sim.add_curfew_policy(T0, T0 + timedelta(days=3))


def test_builder_chains_and_records_metrics():
	cfg = Config(start_time=T0, simulation_days=2)
	sim = (
		Simulation(_airport(), cfg)
		.add_rotation_policy(RotationStrategy.NO_ROTATION)
		.add_maintenance_policy(MaintenanceSchedule(["B"], timedelta(hours=2), timedelta(days=1)))
		.add_scheduled_wind_policy([WindChange(T0 + timedelta(hours=1), 10, 90)])
	)
	total = sim.run()
	assert total == pytest.approx(sim.metrics.total_capacity)
	assert sim.metrics.events_generated == {
		"RunwayRotationPolicy(NoRotation)": 1,
		"MaintenancePolicy": 4,
		"ScheduledWindPolicy": 1,
	}
	assert set(sim.metrics.final_configuration) == {"A", "B"}


def test_first_policy_error_is_raised_after_all_policies_finish():
	slow = SlowPolicy()
	sim = Simulation(_airport(), Config(start_time=T0, simulation_days=1, policy_workers=3))
	errors = [UnknownRunwayError("X"), ValueError("boom")]
	sim.add_policy(FailingPolicy("First", errors[0]))
	sim.add_policy(slow)
	sim.add_policy(FailingPolicy("Second", errors[1]))

	world = sim.build_world()
	with pytest.raises((UnknownRunwayError, ValueError)) as exc:
		sim.generate_events(world)
	assert exc.value in errors
	assert slow.finished.is_set()
	assert slow.events_generated == 24


def test_unknown_runway_in_policy_fails_run():
	sim = Simulation(_airport(), Config(start_time=T0, simulation_days=1))
	sim.add_maintenance_policy(MaintenanceSchedule(["Z"], timedelta(hours=1), timedelta(days=1)))
	with pytest.raises(UnknownRunwayError):
		sim.run()


def test_intelligent_maintenance_keeps_a_runway_open():
	cfg = Config(start_time=T0, simulation_days=2)
	sim = Simulation(_airport(), cfg)
	sim.add_intelligent_maintenance_policy(IntelligentMaintenanceSchedule(["A", "B"], timedelta(hours=4), timedelta(days=1)))
	total = sim.run()
	full = 2 * (1440 + 960)
	# A is down 4h twice, B is down 4h twice, never together
	assert total == pytest.approx(full - 2 * 4 * 60 - 2 * 4 * 40)


def test_repeated_runs_are_independent():
	cfg = Config(start_time=T0, simulation_days=1)
	sim = Simulation(_airport(), cfg).add_rotation_policy(RotationStrategy.PREFERENTIAL_RUNWAY)
	assert sim.run() == pytest.approx(sim.run())

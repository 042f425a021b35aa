from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict

from aircap.airport.models import Runway
from aircap.events.core import Event, EventType, WorldState


class Direction(Enum):
	FORWARD = "forward"   # along the runway's true bearing
	REVERSE = "reverse"   # along the reciprocal bearing


class OperationType(Enum):
	TAKEOFF = "takeoff"
	LANDING = "landing"
	MIXED = "mixed"


@dataclass
class ActiveRunwayInfo:
	designation: str
	operation_type: OperationType
	direction: Direction
	runway: Runway


def copy_configuration(config: Dict[str, ActiveRunwayInfo]) -> Dict[str, ActiveRunwayInfo]:
	return {k: replace(v) for k, v in config.items()}


class CurfewStartEvent(Event):
	type = EventType.CURFEW_START

	def apply(self, world: WorldState) -> None:
		world.set_curfew_active(True)
		world.notify_curfew_change(True, self.time)


class CurfewEndEvent(Event):
	type = EventType.CURFEW_END

	def apply(self, world: WorldState) -> None:
		world.set_curfew_active(False)
		world.notify_curfew_change(False, self.time)


class RunwayMaintenanceStartEvent(Event):
	type = EventType.RUNWAY_MAINTENANCE_START

	def __init__(self, runway_id: str, timestamp: datetime) -> None:
		super().__init__(timestamp)
		self._runway_id = runway_id

	@property
	def runway_id(self) -> str:
		return self._runway_id

	def apply(self, world: WorldState) -> None:
		world.set_runway_available(self.runway_id, False)
		world.notify_runway_availability_change(self.runway_id, False, self.time)


class RunwayMaintenanceEndEvent(Event):
	type = EventType.RUNWAY_MAINTENANCE_END

	def __init__(self, runway_id: str, timestamp: datetime) -> None:
		super().__init__(timestamp)
		self._runway_id = runway_id

	@property
	def runway_id(self) -> str:
		return self._runway_id

	def apply(self, world: WorldState) -> None:
		world.set_runway_available(self.runway_id, True)
		world.notify_runway_availability_change(self.runway_id, True, self.time)


class RotationChangeEvent(Event):
	type = EventType.ROTATION_CHANGE

	def __init__(self, multiplier: float, timestamp: datetime) -> None:
		super().__init__(timestamp)
		self._multiplier = multiplier

	@property
	def multiplier(self) -> float:
		return self._multiplier

	def apply(self, world: WorldState) -> None:
		world.set_rotation_multiplier(self.multiplier)


class GateCapacityConstraintEvent(Event):
	type = EventType.GATE_CAPACITY_CONSTRAINT

	def __init__(self, max_movements_per_second: float, timestamp: datetime) -> None:
		super().__init__(timestamp)
		self._max_movements_per_second = max_movements_per_second

	@property
	def max_movements_per_second(self) -> float:
		return self._max_movements_per_second

	def apply(self, world: WorldState) -> None:
		world.set_gate_capacity_constraint(self.max_movements_per_second)


class TaxiTimeAdjustmentEvent(Event):
	type = EventType.TAXI_TIME_ADJUSTMENT

	def __init__(self, total_taxi_time_overhead: timedelta, timestamp: datetime) -> None:
		super().__init__(timestamp)
		self._total_taxi_time_overhead = total_taxi_time_overhead

	@property
	def total_taxi_time_overhead(self) -> timedelta:
		return self._total_taxi_time_overhead

	def apply(self, world: WorldState) -> None:
		world.set_taxi_time_overhead(self.total_taxi_time_overhead)


class WindChangeEvent(Event):
	type = EventType.WIND_CHANGE

	def __init__(self, speed_knots: float, direction_true: float, timestamp: datetime) -> None:
		super().__init__(timestamp)
		self._speed_knots = speed_knots
		self._direction_true = direction_true

	@property
	def speed_knots(self) -> float:
		return self._speed_knots

	@property
	def direction_true(self) -> float:
		return self._direction_true

	def apply(self, world: WorldState) -> None:
		# The world notifies the runway manager and schedules the resulting configuration change
		world.set_wind(self.speed_knots, self.direction_true)


class ActiveRunwayConfigurationChangedEvent(Event):
	type = EventType.ACTIVE_RUNWAY_CONFIGURATION_CHANGED

	def __init__(self, configuration: Dict[str, ActiveRunwayInfo], timestamp: datetime) -> None:
		super().__init__(timestamp)
		self._configuration = copy_configuration(configuration)

	@property
	def configuration(self) -> Dict[str, ActiveRunwayInfo]:
		return copy_configuration(self._configuration)

	def apply(self, world: WorldState) -> None:
		world.set_active_runway_configuration(self._configuration)

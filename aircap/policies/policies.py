from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from aircap.errors import ConfigurationError
from aircap.events.core import EventWorld
from aircap.events.events import (
	CurfewEndEvent,
	CurfewStartEvent,
	GateCapacityConstraintEvent,
	RotationChangeEvent,
	RunwayMaintenanceEndEvent,
	RunwayMaintenanceStartEvent,
	TaxiTimeAdjustmentEvent,
	WindChangeEvent,
)
from aircap.policies.core import Policy
from aircap.simulation.wind import normalize_direction


ONE_DAY = timedelta(days=1)
MAX_CURFEW_DURATION = timedelta(days=30)


class CurfewPolicy(Policy):
	"""Closes the airport between two times of day, every day.

	``start`` and ``end`` give the first occurrence; occurrences repeat every
	24 hours and also cover the part of an overnight curfew already running
	when the simulation starts. A closure of a day or longer is a single
	one-off closure from ``start`` to ``end``.

	A window that opens inside an overnight curfew gets an extra start event at
	the window start, so 23:00-06:00 over N days from midnight emits 2N + 1
	events. The last start has no end when its closure outlasts the window.
	"""

	def __init__(self, start: datetime, end: datetime, max_duration: timedelta = MAX_CURFEW_DURATION) -> None:
		super().__init__("CurfewPolicy")
		if end <= start:
			raise ConfigurationError("curfew end time must be after start time")
		if end - start > max_duration:
			raise ConfigurationError("curfew duration exceeds maximum allowed duration")
		self.start = start
		self.end = end

	@property
	def duration(self) -> timedelta:
		return self.end - self.start

	def occurrences(self, window_start: datetime, window_end: datetime) -> List[Tuple[datetime, datetime]]:
		if self.duration >= ONE_DAY:
			if self.start < window_end and self.end > window_start:
				return [(self.start, self.end)]
			return []

		out = []
		k = (window_start - self.end) // ONE_DAY
		while True:
			s = self.start + k * ONE_DAY
			if s >= window_end:
				break
			e = s + self.duration
			if e > window_start:
				out.append((s, e))
			k += 1
		return out

	def generate_events(self, world: EventWorld) -> None:
		window_start, window_end = world.get_start_time(), world.get_end_time()
		for s, e in self.occurrences(window_start, window_end):
			self.schedule(world, CurfewStartEvent(max(s, window_start)))
			if e < window_end:
				self.schedule(world, CurfewEndEvent(e))


@dataclass
class MaintenanceSchedule:
	runway_designations: List[str]
	duration: timedelta
	frequency: timedelta


class MaintenancePolicy(Policy):
	def __init__(self, schedule: MaintenanceSchedule) -> None:
		super().__init__("MaintenancePolicy")
		if schedule.duration <= timedelta(0):
			raise ConfigurationError(f"maintenance duration must be positive, got {schedule.duration}")
		if schedule.frequency <= timedelta(0):
			raise ConfigurationError(f"maintenance frequency must be positive, got {schedule.frequency}")
		self.schedule_config = schedule

	def generate_events(self, world: EventWorld) -> None:
		self.check_runways(world, self.schedule_config.runway_designations)
		window_start, window_end = world.get_start_time(), world.get_end_time()
		for runway_id in self.schedule_config.runway_designations:
			t = window_start
			while t < window_end:
				self.schedule(world, RunwayMaintenanceStartEvent(runway_id, t))
				finish = t + self.schedule_config.duration
				if finish < window_end:
					self.schedule(world, RunwayMaintenanceEndEvent(runway_id, finish))
				t += self.schedule_config.frequency


@dataclass
class IntelligentMaintenanceSchedule:
	runway_designations: List[str]
	duration: timedelta
	frequency: timedelta
	minimum_operational_runways: int = 1
	curfew_start: Optional[datetime] = None  # only the time of day is used
	curfew_end: Optional[datetime] = None


@dataclass
class _Window:
	runway_id: str
	start: datetime
	end: datetime


class IntelligentMaintenancePolicy(Policy):
	"""Maintenance that hides inside curfews and keeps enough runways open.

	Runways are staggered across the maintenance period. Each window prefers,
	in order: a curfew long enough to contain it, the slot just before a
	curfew, the slot just after a curfew, then the nominal start. A slot is
	only taken if concurrent maintenance leaves at least
	``minimum_operational_runways`` of the scheduled runways open. When none of
	those is free the window moves to the end of a blocking window, or is
	skipped if that would run past the simulation end.
	"""

	def __init__(self, schedule: IntelligentMaintenanceSchedule) -> None:
		super().__init__("IntelligentMaintenancePolicy")
		if schedule.duration <= timedelta(0) or schedule.frequency <= timedelta(0):
			raise ConfigurationError("maintenance duration and frequency must be positive")
		if schedule.minimum_operational_runways <= 0:
			schedule = replace(schedule, minimum_operational_runways=1)
		self.schedule_config = schedule

	def generate_events(self, world: EventWorld) -> None:
		cfg = self.schedule_config
		self.check_runways(world, cfg.runway_designations)
		window_start, window_end = world.get_start_time(), world.get_end_time()

		windows_per_runway = max(1, (window_end - window_start) // cfg.frequency)
		curfews = self._curfew_windows(window_start, window_end)
		booked: List[_Window] = []

		n = len(cfg.runway_designations)
		for idx, runway_id in enumerate(cfg.runway_designations):
			nominal = window_start + idx * (cfg.frequency / n)
			for _ in range(windows_per_runway):
				start = self._find_slot(nominal, window_end, curfews, booked)
				if start is None:
					start = self._next_free(nominal, window_end, booked)
				if start is None:
					nominal += cfg.frequency
					continue
				end = start + cfg.duration
				if end > window_end:
					break
				self.schedule(world, RunwayMaintenanceStartEvent(runway_id, start))
				self.schedule(world, RunwayMaintenanceEndEvent(runway_id, end))
				booked.append(_Window(runway_id, start, end))
				nominal += cfg.frequency

	def _curfew_windows(self, window_start: datetime, window_end: datetime) -> List[Tuple[datetime, datetime]]:
		cfg = self.schedule_config
		if cfg.curfew_start is None or cfg.curfew_end is None:
			return []
		windows = []
		day = window_start
		while day < window_end:
			s = day.replace(hour=cfg.curfew_start.hour, minute=cfg.curfew_start.minute, second=0, microsecond=0)
			e = day.replace(hour=cfg.curfew_end.hour, minute=cfg.curfew_end.minute, second=0, microsecond=0)
			if e <= s:
				e += ONE_DAY
			if s <= window_end and e >= window_start:
				windows.append((s, e))
			day += ONE_DAY
		return windows

	def _find_slot(self, preferred: datetime, window_end: datetime, curfews: List[Tuple[datetime, datetime]], booked: List[_Window]) -> Optional[datetime]:
		duration = self.schedule_config.duration

		for s, e in curfews:
			if s >= preferred and e - s >= duration and self._coordinated(s, s + duration, booked):
				return s
		for s, _ in curfews:
			before = s - duration
			if before >= preferred and s < window_end and self._coordinated(before, s, booked):
				return before
		for _, e in curfews:
			if e >= preferred and e + duration < window_end and self._coordinated(e, e + duration, booked):
				return e
		if self._coordinated(preferred, preferred + duration, booked):
			return preferred
		return None

	def _next_free(self, preferred: datetime, window_end: datetime, booked: List[_Window]) -> Optional[datetime]:
		duration = self.schedule_config.duration
		for candidate in sorted(w.end for w in booked if w.end >= preferred):
			if candidate + duration <= window_end and self._coordinated(candidate, candidate + duration, booked):
				return candidate
		return None

	def _coordinated(self, start: datetime, end: datetime, booked: List[_Window]) -> bool:
		total = len(self.schedule_config.runway_designations)
		if total == 1:
			return True
		concurrent = sum(1 for w in booked if start < w.end and end > w.start)
		return concurrent < total - self.schedule_config.minimum_operational_runways


class RotationStrategy(Enum):
	NO_ROTATION = "NoRotation"
	TIME_BASED_ROTATION = "TimeBasedRotation"
	PREFERENTIAL_RUNWAY = "PreferentialRunway"
	NOISE_OPTIMIZED_ROTATION = "NoiseOptimizedRotation"


DEFAULT_ROTATION_EFFICIENCY: Dict[RotationStrategy, float] = {
	RotationStrategy.NO_ROTATION: 1.0,
	RotationStrategy.TIME_BASED_ROTATION: 0.95,
	RotationStrategy.PREFERENTIAL_RUNWAY: 0.90,
	RotationStrategy.NOISE_OPTIMIZED_ROTATION: 0.80,
}


@dataclass
class RotationSchedule:
	start_hour: int
	end_hour: int
	days_of_week: Optional[List[int]] = None  # Monday = 0, None = every day


class RunwayRotationPolicy(Policy):
	def __init__(self, strategy: RotationStrategy, efficiencies: Optional[Dict[RotationStrategy, float]] = None, schedule: Optional[RotationSchedule] = None) -> None:
		super().__init__(f"RunwayRotationPolicy({strategy.value})")
		self.strategy = strategy
		self.efficiencies = dict(DEFAULT_ROTATION_EFFICIENCY if efficiencies is None else efficiencies)
		if strategy not in self.efficiencies:
			raise ConfigurationError(f"no efficiency configured for rotation strategy {strategy.value}")
		multiplier = self.efficiencies[strategy]
		if not 0 < multiplier <= 1:
			raise ConfigurationError(f"rotation efficiency must be in (0, 1], got {multiplier}")
		if schedule is not None and not (0 <= schedule.start_hour <= 23 and 0 <= schedule.end_hour <= 23):
			raise ConfigurationError("rotation schedule hours must be between 0 and 23")
		self.rotation_schedule = schedule

	@property
	def multiplier(self) -> float:
		return self.efficiencies[self.strategy]

	def generate_events(self, world: EventWorld) -> None:
		window_start, window_end = world.get_start_time(), world.get_end_time()
		if self.rotation_schedule is None:
			self.schedule(world, RotationChangeEvent(self.multiplier, window_start))
			return

		sched = self.rotation_schedule
		day = window_start.replace(hour=0, minute=0, second=0, microsecond=0)
		while day < window_end:
			if sched.days_of_week is None or day.weekday() in sched.days_of_week:
				on = day.replace(hour=sched.start_hour)
				off = day.replace(hour=sched.end_hour)
				if window_start < on < window_end:
					self.schedule(world, RotationChangeEvent(self.multiplier, on))
				if window_start < off < window_end:
					self.schedule(world, RotationChangeEvent(1.0, off))
			day += ONE_DAY


@dataclass
class GateCapacityConstraint:
	total_gates: int
	average_turnaround: timedelta


class GateCapacityPolicy(Policy):
	def __init__(self, constraint: GateCapacityConstraint) -> None:
		super().__init__("GateCapacityPolicy")
		if constraint.total_gates <= 0:
			raise ConfigurationError(f"total gates must be positive, got {constraint.total_gates}")
		if constraint.average_turnaround <= timedelta(0):
			raise ConfigurationError(f"average turnaround time must be positive, got {constraint.average_turnaround}")
		self.constraint = constraint

	@property
	def movements_per_second(self) -> float:
		turnaround_hours = self.constraint.average_turnaround.total_seconds() / 3600.0
		arrivals_per_hour = self.constraint.total_gates / turnaround_hours
		# Every gate turn is one arrival and one departure
		return arrivals_per_hour * 2 / 3600.0

	def generate_events(self, world: EventWorld) -> None:
		self.schedule(world, GateCapacityConstraintEvent(self.movements_per_second, world.get_start_time()))


@dataclass
class TaxiTimeConfiguration:
	average_taxi_in: timedelta
	average_taxi_out: timedelta


class TaxiTimePolicy(Policy):
	def __init__(self, config: TaxiTimeConfiguration) -> None:
		super().__init__("TaxiTimePolicy")
		if config.average_taxi_in < timedelta(0):
			raise ConfigurationError(f"average taxi-in time cannot be negative: {config.average_taxi_in}")
		if config.average_taxi_out < timedelta(0):
			raise ConfigurationError(f"average taxi-out time cannot be negative: {config.average_taxi_out}")
		self.config = config

	@property
	def total_overhead(self) -> timedelta:
		return self.config.average_taxi_in + self.config.average_taxi_out

	def generate_events(self, world: EventWorld) -> None:
		self.schedule(world, TaxiTimeAdjustmentEvent(self.total_overhead, world.get_start_time()))


class WindPolicy(Policy):
	"""Constant wind for the whole simulation."""

	def __init__(self, speed_knots: float, direction_true: float) -> None:
		super().__init__("WindPolicy")
		if speed_knots < 0:
			raise ConfigurationError("wind speed cannot be negative")
		self.speed_knots = speed_knots
		self.direction_true = normalize_direction(direction_true)

	def generate_events(self, world: EventWorld) -> None:
		self.schedule(world, WindChangeEvent(self.speed_knots, self.direction_true, world.get_start_time()))


@dataclass
class WindChange:
	timestamp: datetime
	speed_knots: float
	direction_true: float


class ScheduledWindPolicy(Policy):
	def __init__(self, wind_schedule: Sequence[WindChange]) -> None:
		super().__init__("ScheduledWindPolicy")
		if not wind_schedule:
			raise ConfigurationError("wind schedule cannot be empty")
		changes: List[WindChange] = []
		for i, change in enumerate(wind_schedule):
			if change.speed_knots < 0:
				raise ConfigurationError(f"wind change {i}: wind speed cannot be negative")
			if changes and change.timestamp <= changes[-1].timestamp:
				raise ConfigurationError("wind schedule must be in chronological order")
			changes.append(WindChange(change.timestamp, change.speed_knots, normalize_direction(change.direction_true)))
		self.wind_schedule = changes

	def generate_events(self, world: EventWorld) -> None:
		window_start, window_end = world.get_start_time(), world.get_end_time()
		for change in self.wind_schedule:
			if window_start <= change.timestamp <= window_end:
				self.schedule(world, WindChangeEvent(change.speed_knots, change.direction_true, change.timestamp))

	def wind_at(self, timestamp: datetime) -> Tuple[float, float]:
		speed, direction = 0.0, 0.0
		for change in self.wind_schedule:
			if change.timestamp > timestamp:
				break
			speed, direction = change.speed_knots, change.direction_true
		return speed, direction

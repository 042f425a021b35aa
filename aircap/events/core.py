from __future__ import annotations

import heapq
import itertools
import threading
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Protocol, Tuple


class EventType(Enum):
	CURFEW_START = "CurfewStart"
	CURFEW_END = "CurfewEnd"
	RUNWAY_MAINTENANCE_START = "RunwayMaintenanceStart"
	RUNWAY_MAINTENANCE_END = "RunwayMaintenanceEnd"
	ROTATION_CHANGE = "RotationChange"
	GATE_CAPACITY_CONSTRAINT = "GateCapacityConstraint"
	TAXI_TIME_ADJUSTMENT = "TaxiTimeAdjustment"
	WIND_CHANGE = "WindChange"
	ACTIVE_RUNWAY_CONFIGURATION_CHANGED = "ActiveRunwayConfigurationChanged"

	def __str__(self) -> str:
		return self.value


class WorldState(Protocol):
	"""Mutation surface events are allowed to touch when applied."""

	def set_curfew_active(self, active: bool) -> None: ...
	def get_curfew_active(self) -> bool: ...
	def set_runway_available(self, runway_id: str, available: bool) -> None: ...
	def get_runway_available(self, runway_id: str) -> bool: ...
	def set_rotation_multiplier(self, multiplier: float) -> None: ...
	def get_rotation_multiplier(self) -> float: ...
	def set_gate_capacity_constraint(self, max_movements_per_second: float) -> None: ...
	def get_gate_capacity_constraint(self) -> float: ...
	def set_taxi_time_overhead(self, overhead: timedelta) -> None: ...
	def get_taxi_time_overhead(self) -> timedelta: ...
	def set_wind(self, speed_knots: float, direction_true: float) -> None: ...
	def set_active_runway_configuration(self, config: Dict[str, object]) -> None: ...
	def notify_runway_availability_change(self, runway_id: str, available: bool, timestamp: datetime) -> None: ...
	def notify_curfew_change(self, active: bool, timestamp: datetime) -> None: ...


class EventWorld(Protocol):
	"""The only view of the world a policy gets while generating events."""

	def schedule_event(self, event: "Event") -> None: ...
	def get_event_queue_length(self) -> int: ...
	def get_start_time(self) -> datetime: ...
	def get_end_time(self) -> datetime: ...
	def get_runway_ids(self) -> List[str]: ...


class Event:
	"""A state change at a point in time. Subclasses implement ``apply``."""

	type: EventType

	def __init__(self, timestamp: datetime) -> None:
		self._timestamp = timestamp

	@property
	def time(self) -> datetime:
		return self._timestamp

	def apply(self, world: WorldState) -> None:
		raise NotImplementedError

	def __repr__(self) -> str:
		return f"{type(self).__name__}(time={self._timestamp.isoformat()})"


class EventQueue:
	"""Thread-safe min-heap of events keyed by time.

	Equal timestamps pop in insertion order. With several producers pushing
	concurrently the interleaving of their inserts is not defined, so callers
	must not rely on ordering between events from different producers.
	"""

	def __init__(self) -> None:
		self._heap: List[Tuple[datetime, int, Event]] = []
		self._seq = itertools.count()
		self._lock = threading.Lock()

	def push(self, event: Event) -> None:
		with self._lock:
			heapq.heappush(self._heap, (event.time, next(self._seq), event))

	def pop(self) -> Optional[Event]:
		with self._lock:
			if not self._heap:
				return None
			return heapq.heappop(self._heap)[2]

	def peek(self) -> Optional[Event]:
		with self._lock:
			if not self._heap:
				return None
			return self._heap[0][2]

	def has_next(self) -> bool:
		with self._lock:
			return bool(self._heap)

	def __len__(self) -> int:
		with self._lock:
			return len(self._heap)

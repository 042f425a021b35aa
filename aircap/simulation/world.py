from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from aircap.airport.models import Airport, Runway
from aircap.errors import ConfigurationError, UnknownRunwayError
from aircap.events.core import Event, EventQueue
from aircap.events.events import ActiveRunwayConfigurationChangedEvent, ActiveRunwayInfo, copy_configuration
from aircap.simulation.runway_manager import RunwayManager
from aircap.simulation.wind import normalize_direction


@dataclass
class RunwayState:
	runway: Runway
	available: bool = True


class World:
	"""Simulation state that events mutate.

	Starts with every runway available, no curfew, calm wind, a rotation
	multiplier of 1.0 and no gate or taxi constraint. Only the engine's
	processing path mutates it, one event at a time.
	"""

	def __init__(self, airport: Airport, start_time: datetime, end_time: datetime, reference_duration_seconds: float = 3600.0) -> None:
		if end_time <= start_time:
			raise ConfigurationError("simulation end time must be after start time")
		self.airport = airport
		self.start_time = start_time
		self.end_time = end_time
		self.current_time = start_time
		self.events = EventQueue()

		self.runway_states: Dict[str, RunwayState] = {r.designation: RunwayState(r) for r in airport.runways}
		self.curfew_active = False
		self.rotation_multiplier = 1.0
		self.gate_capacity_constraint = 0.0  # movements/second, 0 = none
		self.taxi_time_overhead = timedelta(0)
		self.wind_speed = 0.0
		self.wind_direction = 0.0

		self.runway_manager = RunwayManager(airport.runways, airport.compatibility, reference_duration_seconds)
		self._config_lock = threading.Lock()
		self._active_configuration = self.runway_manager.get_active_configuration()

	# Curfew

	def set_curfew_active(self, active: bool) -> None:
		self.curfew_active = active

	def get_curfew_active(self) -> bool:
		return self.curfew_active

	# Runway availability

	def _state(self, runway_id: str) -> RunwayState:
		state = self.runway_states.get(runway_id)
		if state is None:
			raise UnknownRunwayError(runway_id)
		return state

	def set_runway_available(self, runway_id: str, available: bool) -> None:
		self._state(runway_id).available = available

	def get_runway_available(self, runway_id: str) -> bool:
		return self._state(runway_id).available

	def available_runways(self) -> List[Runway]:
		return [s.runway for s in self.runway_states.values() if s.available]

	# Capacity modifiers

	def set_rotation_multiplier(self, multiplier: float) -> None:
		self.rotation_multiplier = multiplier

	def get_rotation_multiplier(self) -> float:
		return self.rotation_multiplier

	def set_gate_capacity_constraint(self, max_movements_per_second: float) -> None:
		if max_movements_per_second < 0:
			raise ConfigurationError(f"gate capacity constraint cannot be negative: {max_movements_per_second}")
		self.gate_capacity_constraint = max_movements_per_second

	def get_gate_capacity_constraint(self) -> float:
		return self.gate_capacity_constraint

	def set_taxi_time_overhead(self, overhead: timedelta) -> None:
		if overhead < timedelta(0):
			raise ConfigurationError(f"taxi time overhead cannot be negative: {overhead}")
		self.taxi_time_overhead = overhead

	def get_taxi_time_overhead(self) -> timedelta:
		return self.taxi_time_overhead

	# Wind

	def set_wind(self, speed_knots: float, direction_true: float) -> None:
		if speed_knots < 0:
			raise ConfigurationError(f"wind speed cannot be negative: {speed_knots}")
		self.wind_speed = speed_knots
		self.wind_direction = normalize_direction(direction_true)
		self.runway_manager.on_wind_changed(self.wind_speed, self.wind_direction)
		self._schedule_configuration_change(self.current_time)

	# Active runway configuration

	def set_active_runway_configuration(self, config: Dict[str, ActiveRunwayInfo]) -> None:
		with self._config_lock:
			self._active_configuration = copy_configuration(config)

	def get_active_runway_configuration(self) -> Dict[str, ActiveRunwayInfo]:
		with self._config_lock:
			return copy_configuration(self._active_configuration)

	def notify_runway_availability_change(self, runway_id: str, available: bool, timestamp: datetime) -> None:
		if available:
			self.runway_manager.on_runway_available(runway_id)
		else:
			self.runway_manager.on_runway_unavailable(runway_id)
		self._schedule_configuration_change(timestamp)

	def notify_curfew_change(self, active: bool, timestamp: datetime) -> None:
		self.runway_manager.on_curfew_changed(active)
		self._schedule_configuration_change(timestamp)

	def _schedule_configuration_change(self, timestamp: datetime) -> None:
		config = self.runway_manager.get_active_configuration()
		self.schedule_event(ActiveRunwayConfigurationChangedEvent(config, timestamp))

	# Policy-facing view

	def schedule_event(self, event: Event) -> None:
		self.events.push(event)

	def get_event_queue_length(self) -> int:
		return len(self.events)

	def get_start_time(self) -> datetime:
		return self.start_time

	def get_end_time(self) -> datetime:
		return self.end_time

	def get_runway_ids(self) -> List[str]:
		return list(self.runway_states)

	def runway(self, runway_id: str) -> Optional[Runway]:
		state = self.runway_states.get(runway_id)
		return None if state is None else state.runway

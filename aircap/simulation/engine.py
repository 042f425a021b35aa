from __future__ import annotations

from datetime import timedelta
from typing import Iterable

from aircap.airport.models import Runway
from aircap.simulation.world import World
from aircap.utils.logging import get_logger


logger = get_logger(__name__)


class Engine:
	"""Integrates capacity over the timeline of world-state changes.

	Events are applied strictly one at a time in time order. The window before
	each event is integrated with the state that held before that event.
	"""

	def __init__(self, integrate_active_configuration: bool = False) -> None:
		self.integrate_active_configuration = integrate_active_configuration
		self.events_processed = 0

	def calculate(self, world: World) -> float:
		logger.info(
			"Starting capacity calculation | airport=%s | start=%s | end=%s | events=%d",
			world.airport.name, world.start_time.isoformat(), world.end_time.isoformat(), len(world.events),
		)
		total = self._process_timeline(world)
		logger.info("Capacity calculation complete | events_processed=%d | total=%.2f", self.events_processed, total)
		return total

	def _process_timeline(self, world: World) -> float:
		total = 0.0
		previous = world.start_time
		self.events_processed = 0

		while True:
			evt = world.events.pop()
			if evt is None:
				break
			event_time = evt.time

			if event_time < world.start_time:
				logger.debug("Skipping %s before start time at %s", evt.type, event_time.isoformat())
				continue
			if event_time >= world.end_time:
				logger.debug("Event %s at %s is past the end of the window, stopping", evt.type, event_time.isoformat())
				break

			window = self.window_capacity(world, event_time - previous)
			logger.debug("Window %s -> %s capacity=%.3f", previous.isoformat(), event_time.isoformat(), window)
			total += window

			world.current_time = event_time
			try:
				evt.apply(world)
			except Exception:
				logger.error("Failed to apply %s at %s", evt.type, event_time.isoformat())
				raise
			previous = event_time
			self.events_processed += 1

		if previous < world.end_time:
			final = self.window_capacity(world, world.end_time - previous)
			logger.debug("Final window %s -> %s capacity=%.3f", previous.isoformat(), world.end_time.isoformat(), final)
			total += final

		return total

	def _runways(self, world: World) -> Iterable[Runway]:
		if self.integrate_active_configuration:
			return [info.runway for info in world.get_active_runway_configuration().values()]
		return world.available_runways()

	def window_capacity(self, world: World, duration: timedelta) -> float:
		if world.curfew_active:
			return 0.0

		seconds = duration.total_seconds()
		capacity = 0.0
		for runway in self._runways(world):
			capacity += seconds / runway.separation_seconds

		capacity *= world.rotation_multiplier

		if world.gate_capacity_constraint > 0:
			effective = world.gate_capacity_constraint
			taxi_seconds = world.taxi_time_overhead.total_seconds()
			if taxi_seconds > 0:
				# Taxi time stretches the turnaround each gate movement implies
				effective = 1.0 / (1.0 / effective + taxi_seconds)
			gate_capacity = effective * seconds
			if gate_capacity < capacity:
				capacity = gate_capacity

		return capacity

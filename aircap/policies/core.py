from __future__ import annotations

from typing import Iterable

from aircap.errors import UnknownRunwayError
from aircap.events.core import Event, EventWorld


class Policy:
	"""Produces events for a simulation run.

	Policies only see the narrow ``EventWorld`` view and never mutate world
	state directly. ``generate_events`` is called once per run, possibly on a
	worker thread alongside other policies.
	"""

	def __init__(self, name: str) -> None:
		self.name = name
		self.events_generated = 0

	def generate_events(self, world: EventWorld) -> None:
		raise NotImplementedError

	def schedule(self, world: EventWorld, evt: Event) -> None:
		world.schedule_event(evt)
		self.events_generated += 1

	@staticmethod
	def check_runways(world: EventWorld, runway_ids: Iterable[str]) -> None:
		known = set(world.get_runway_ids())
		for runway_id in runway_ids:
			if runway_id not in known:
				raise UnknownRunwayError(runway_id)

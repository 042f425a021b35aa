from __future__ import annotations

import math
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Sequence

import networkx as nx

from aircap.airport.compatibility import RunwayCompatibility
from aircap.airport.models import Runway
from aircap.events.events import ActiveRunwayInfo, Direction, OperationType, copy_configuration
from aircap.simulation.wind import direction_usable, wind_components


class _ReadWriteLock:
	"""Many concurrent readers or a single writer."""

	def __init__(self) -> None:
		self._cond = threading.Condition(threading.Lock())
		self._readers = 0
		self._writer = False

	@contextmanager
	def read(self) -> Iterator[None]:
		with self._cond:
			while self._writer:
				self._cond.wait()
			self._readers += 1
		try:
			yield
		finally:
			with self._cond:
				self._readers -= 1
				if self._readers == 0:
					self._cond.notify_all()

	@contextmanager
	def write(self) -> Iterator[None]:
		with self._cond:
			while self._writer or self._readers:
				self._cond.wait()
			self._writer = True
		try:
			yield
		finally:
			with self._cond:
				self._writer = False
				self._cond.notify_all()


class RunwayManager:
	"""Selects the active runway configuration.

	Every notification recomputes the whole configuration under the write lock
	before returning, so readers never see a half-updated configuration. The
	maximal compatible runway sets are enumerated once and cached since the
	compatibility graph never changes.
	"""

	def __init__(self, runways: Sequence[Runway], compatibility: Optional[RunwayCompatibility] = None, reference_duration_seconds: float = 3600.0) -> None:
		self._lock = _ReadWriteLock()
		self._runways: List[Runway] = list(runways)
		self._by_id: Dict[str, Runway] = {r.designation: r for r in self._runways}
		self._order: Dict[str, int] = {r.designation: i for i, r in enumerate(self._runways)}
		if compatibility is not None and compatibility.compatible_with is None:
			compatibility = None
		self._compatibility = compatibility
		self._reference_seconds = reference_duration_seconds

		self._available: Dict[str, bool] = {r.designation: True for r in self._runways}
		self._curfew_active = False
		self._wind_speed = 0.0
		self._wind_direction = 0.0
		self._maximal_cliques: Optional[List[List[str]]] = None
		self._configuration: Dict[str, ActiveRunwayInfo] = {}

		self._recalculate()

	# Notifications

	def on_runway_available(self, runway_id: str) -> None:
		with self._lock.write():
			self._available[runway_id] = True
			self._recalculate()

	def on_runway_unavailable(self, runway_id: str) -> None:
		with self._lock.write():
			self._available[runway_id] = False
			self._recalculate()

	def on_curfew_changed(self, active: bool) -> None:
		with self._lock.write():
			self._curfew_active = active
			self._recalculate()

	def on_wind_changed(self, speed_knots: float, direction_true: float) -> None:
		with self._lock.write():
			self._wind_speed = speed_knots
			self._wind_direction = direction_true
			self._recalculate()

	# Queries

	def get_active_configuration(self) -> Dict[str, ActiveRunwayInfo]:
		with self._lock.read():
			return copy_configuration(self._configuration)

	def maximal_cliques(self) -> List[List[str]]:
		with self._lock.write():
			self._ensure_cliques()
			return [list(c) for c in self._maximal_cliques]

	def configuration_capacity(self, runway_ids: Sequence[str]) -> float:
		"""Movements per reference duration for the given runway set."""
		capacity = 0.0
		for runway_id in runway_ids:
			runway = self._by_id.get(runway_id)
			if runway is None or runway.separation_seconds <= 0:
				continue
			capacity += self._reference_seconds / runway.separation_seconds
		return capacity

	# Internals, all called with the write lock held

	def _recalculate(self) -> None:
		self._configuration = {}
		if self._curfew_active:
			return

		available = [rid for rid in self._by_id if self._available.get(rid)]
		usable = self._filter_by_wind(available)

		for runway_id in self._select_max_capacity(usable):
			runway = self._by_id[runway_id]
			self._configuration[runway_id] = ActiveRunwayInfo(
				designation=runway_id,
				operation_type=OperationType.MIXED,
				direction=self._choose_direction(runway),
				runway=runway,
			)

	def _filter_by_wind(self, runway_ids: List[str]) -> List[str]:
		if self._wind_speed == 0:
			return runway_ids
		usable = []
		for runway_id in runway_ids:
			runway = self._by_id[runway_id]
			if runway.crosswind_limit_kt == 0 and runway.tailwind_limit_kt == 0:
				usable.append(runway_id)
			elif self._usable(runway, runway.true_bearing) or self._usable(runway, runway.reciprocal_bearing):
				usable.append(runway_id)
		return usable

	def _usable(self, runway: Runway, bearing: float) -> bool:
		return direction_usable(runway, bearing, self._wind_speed, self._wind_direction)

	def _ensure_cliques(self) -> None:
		if self._maximal_cliques is not None:
			return
		ids = [r.designation for r in self._runways]
		if self._compatibility is None:
			self._maximal_cliques = [ids] if ids else []
			return
		graph = self._compatibility.to_graph(ids)
		cliques = [sorted(c, key=self._order.__getitem__) for c in nx.find_cliques(graph)]
		cliques.sort(key=lambda c: [self._order[i] for i in c])
		self._maximal_cliques = cliques

	def _select_max_capacity(self, available: List[str]) -> List[str]:
		if not available:
			return []
		if self._compatibility is None:
			return available

		self._ensure_cliques()
		pool = set(available)
		best: List[str] = []
		best_capacity = 0.0
		for clique in self._maximal_cliques:
			if not pool.issuperset(clique):
				continue
			capacity = self.configuration_capacity(clique)
			if math.isclose(capacity, best_capacity, rel_tol=1e-9):
				# Same throughput, fewer runways is simpler to operate
				if best and len(clique) < len(best):
					best, best_capacity = clique, capacity
			elif capacity > best_capacity:
				best, best_capacity = clique, capacity
		return list(best)

	def _choose_direction(self, runway: Runway) -> Direction:
		if self._wind_speed == 0:
			return Direction.FORWARD

		forward_head, _ = wind_components(runway.true_bearing, self._wind_speed, self._wind_direction)
		reverse_head, _ = wind_components(runway.reciprocal_bearing, self._wind_speed, self._wind_direction)
		forward_ok = self._usable(runway, runway.true_bearing)
		reverse_ok = self._usable(runway, runway.reciprocal_bearing)

		if forward_ok and not reverse_ok:
			return Direction.FORWARD
		if reverse_ok and not forward_ok:
			return Direction.REVERSE
		return Direction.FORWARD if forward_head >= reverse_head else Direction.REVERSE

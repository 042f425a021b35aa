from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import List, Optional

from aircap.airport.compatibility import RunwayCompatibility
from aircap.errors import ConfigurationError


class SurfaceType(Enum):
	ASPHALT = "asphalt"
	CONCRETE = "concrete"
	GRASS = "grass"
	DIRT = "dirt"


@dataclass(frozen=True)
class Runway:
	designation: str
	true_bearing: float
	minimum_separation: timedelta
	length_m: float = 0.0
	width_m: float = 0.0
	surface: SurfaceType = SurfaceType.ASPHALT
	elevation_m: float = 0.0
	gradient_percent: float = 0.0
	crosswind_limit_kt: float = 0.0  # 0 = no limit
	tailwind_limit_kt: float = 0.0   # 0 = no limit

	@property
	def separation_seconds(self) -> float:
		return self.minimum_separation.total_seconds()

	@property
	def reciprocal_bearing(self) -> float:
		bearing = self.true_bearing + 180.0
		if bearing >= 360.0:
			bearing -= 360.0
		return bearing


@dataclass
class Airport:
	name: str
	runways: List[Runway]
	compatibility: Optional[RunwayCompatibility] = None
	iata_code: str = ""
	icao_code: str = ""
	city: str = ""
	country: str = ""
	_by_id: dict = field(default_factory=dict, init=False, repr=False, compare=False)

	def __post_init__(self) -> None:
		self._by_id = {r.designation: r for r in self.runways}

	@property
	def runway_ids(self) -> List[str]:
		return [r.designation for r in self.runways]

	def runway(self, designation: str) -> Optional[Runway]:
		return self._by_id.get(designation)

	def validate(self) -> None:
		"""Reject an airport description the simulation cannot run against."""
		seen = set()
		for r in self.runways:
			if r.designation in seen:
				raise ConfigurationError(f"duplicate runway designation: {r.designation}")
			seen.add(r.designation)
			if r.separation_seconds <= 0:
				raise ConfigurationError(f"runway {r.designation} must have a positive minimum separation")
			if r.crosswind_limit_kt < 0 or r.tailwind_limit_kt < 0:
				raise ConfigurationError(f"runway {r.designation} wind limits cannot be negative")
		if self.compatibility is not None:
			self.compatibility.validate(self.runway_ids)

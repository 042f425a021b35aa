from __future__ import annotations

from typing import Tuple

import numpy as np

from aircap.airport.models import Runway


def normalize_direction(direction: float) -> float:
	direction = float(np.mod(direction, 360.0))
	# np.mod can round tiny negatives up to exactly 360
	return 0.0 if direction >= 360.0 else direction


def wind_components(runway_bearing: float, wind_speed: float, wind_direction: float) -> Tuple[float, float]:
	"""Return (headwind, crosswind) in knots for operations along ``runway_bearing``.

	Wind direction is where the wind blows from. Negative headwind is a tailwind;
	crosswind is always reported as a magnitude.
	"""
	angle = (wind_direction - runway_bearing + 180.0) % 360.0 - 180.0
	rad = np.deg2rad(angle)
	headwind = wind_speed * np.cos(rad)
	crosswind = abs(wind_speed * np.sin(rad))
	return float(headwind), float(crosswind)


def within_limits(runway: Runway, headwind: float, crosswind: float) -> bool:
	if runway.crosswind_limit_kt > 0 and crosswind > runway.crosswind_limit_kt:
		return False
	if runway.tailwind_limit_kt > 0 and headwind < -runway.tailwind_limit_kt:
		return False
	return True


def direction_usable(runway: Runway, bearing: float, wind_speed: float, wind_direction: float) -> bool:
	headwind, crosswind = wind_components(bearing, wind_speed, wind_direction)
	return within_limits(runway, headwind, crosswind)

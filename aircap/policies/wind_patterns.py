from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import List, Optional, Sequence

import numpy as np

from aircap.errors import ConfigurationError
from aircap.policies.policies import WindChange
from aircap.simulation.wind import normalize_direction


def diurnal_wind_pattern(start_date: datetime, days: int, morning_speed: float, afternoon_speed: float, evening_speed: float, direction: float) -> List[WindChange]:
	"""Calm nights, building through the day: 00:00 calm, 06:00, 15:00 and 21:00 changes."""
	midnight = start_date.replace(hour=0, minute=0, second=0, microsecond=0)
	schedule: List[WindChange] = []
	for day in range(days):
		current = midnight + timedelta(days=day)
		schedule.append(WindChange(current, 0.0, direction))
		schedule.append(WindChange(current + timedelta(hours=6), morning_speed, direction))
		schedule.append(WindChange(current + timedelta(hours=15), afternoon_speed, direction))
		schedule.append(WindChange(current + timedelta(hours=21), evening_speed, direction))
	return schedule


def constant_wind_pattern(timestamp: datetime, speed_knots: float, direction_true: float) -> List[WindChange]:
	return [WindChange(timestamp, speed_knots, direction_true)]


def frontal_passage_pattern(passage_time: datetime, pre_speed: float, pre_direction: float, post_speed: float, post_direction: float) -> List[WindChange]:
	return [
		WindChange(passage_time - timedelta(hours=1), pre_speed, pre_direction),
		WindChange(passage_time, post_speed, post_direction),
	]


def linear_wind_transition(start_time: datetime, duration: timedelta, steps: int, initial_speed: float, initial_direction: float, final_speed: float, final_direction: float) -> List[WindChange]:
	"""Interpolate speed and direction in ``steps`` changes, turning the short way round."""
	if steps < 2:
		raise ConfigurationError(f"steps must be at least 2, got {steps}")

	delta = final_direction - initial_direction
	if delta > 180:
		delta -= 360
	elif delta < -180:
		delta += 360

	progress = np.linspace(0.0, 1.0, steps)
	speeds = initial_speed + (final_speed - initial_speed) * progress
	directions = np.mod(initial_direction + delta * progress, 360.0)
	step = duration / (steps - 1)

	return [
		WindChange(start_time + i * step, float(speeds[i]), normalize_direction(directions[i]))
		for i in range(steps)
	]


def seasonal_wind_pattern(year: int, winter: Sequence[float], spring: Sequence[float], summer: Sequence[float], fall: Sequence[float], tz: Optional[tzinfo] = None) -> List[WindChange]:
	"""One change per season; each season is given as (speed_knots, direction_true)."""
	starts = [(1, 1), (3, 20), (6, 21), (9, 22)]
	return [
		WindChange(datetime(year, month, day, tzinfo=tz), float(speed), float(direction))
		for (month, day), (speed, direction) in zip(starts, (winter, spring, summer, fall))
	]


def combine_wind_schedules(*schedules: Sequence[WindChange]) -> List[WindChange]:
	combined = [change for schedule in schedules for change in schedule]
	combined.sort(key=lambda c: c.timestamp)
	return combined

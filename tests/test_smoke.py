from datetime import datetime, timezone

import pytest

from aircap.config import Config
from aircap.ingestion.airports import sample_airport
from aircap.orchestrator.pipeline import CapacityPipeline, Scenario
from aircap.policies.policies import RotationStrategy


def test_pipeline_runs():
	start = datetime(2024, 1, 1, tzinfo=timezone.utc)
	cfg = Config(start_time=start, simulation_days=14)
	scenario = Scenario(
		curfew=(start.replace(hour=23), start.replace(day=2, hour=6)),
		wind=(12.0, 270.0),
		rotation=RotationStrategy.TIME_BASED_ROTATION,
		total_gates=40,
		taxi_in_minutes=6,
		taxi_out_minutes=9,
	)
	out = CapacityPipeline(cfg).run_once(sample_airport(), scenario)
	assert out.annual_capacity > 0
	assert out.daily_average * 14 == pytest.approx(out.annual_capacity)
	assert out.events_generated["CurfewPolicy"] == 29
	assert out.events_processed > 28
	assert set(out.active_runways) <= {"09L", "09R", "18", "08"}

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from aircap.airport.models import Airport
from aircap.config import Config
from aircap.orchestrator.sim import Simulation
from aircap.policies.policies import (
	GateCapacityConstraint,
	MaintenanceSchedule,
	RotationStrategy,
	TaxiTimeConfiguration,
)
from aircap.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass
class Scenario:
	curfew: Optional[Tuple[datetime, datetime]] = None
	wind: Optional[Tuple[float, float]] = None  # (speed kt, direction deg true)
	rotation: RotationStrategy = RotationStrategy.NO_ROTATION
	maintenance: List[MaintenanceSchedule] = field(default_factory=list)
	total_gates: Optional[int] = None
	turnaround_minutes: float = 45.0
	taxi_in_minutes: float = 0.0
	taxi_out_minutes: float = 0.0


@dataclass
class PipelineOutput:
	annual_capacity: float
	daily_average: float
	events_processed: int
	events_generated: Dict[str, int]
	active_runways: Dict[str, str]  # designation -> direction at end of run
	latency_seconds: float


class CapacityPipeline:
	def __init__(self, config: Config) -> None:
		self.config = config

	def build(self, airport: Airport, scenario: Scenario) -> Simulation:
		sim = Simulation(airport, self.config)
		if scenario.curfew is not None:
			sim.add_curfew_policy(*scenario.curfew)
		if scenario.wind is not None:
			sim.add_wind_policy(*scenario.wind)
		sim.add_rotation_policy(scenario.rotation)
		for schedule in scenario.maintenance:
			sim.add_maintenance_policy(schedule)
		if scenario.total_gates is not None:
			sim.add_gate_capacity_policy(GateCapacityConstraint(
				total_gates=scenario.total_gates,
				average_turnaround=timedelta(minutes=scenario.turnaround_minutes),
			))
		if scenario.taxi_in_minutes or scenario.taxi_out_minutes:
			sim.add_taxi_time_policy(TaxiTimeConfiguration(
				average_taxi_in=timedelta(minutes=scenario.taxi_in_minutes),
				average_taxi_out=timedelta(minutes=scenario.taxi_out_minutes),
			))
		return sim

	def run_once(self, airport: Airport, scenario: Scenario) -> PipelineOutput:
		start = time.time()
		logger.info("Building simulation for %s...", airport.name)
		sim = self.build(airport, scenario)

		logger.info("Running %d-day simulation...", self.config.simulation_days)
		total = sim.run()
		latency = time.time() - start
		logger.info("Annual capacity: %.0f movements | latency=%.2fs", total, latency)

		return PipelineOutput(
			annual_capacity=total,
			daily_average=total / self.config.simulation_days,
			events_processed=sim.metrics.events_processed,
			events_generated=sim.metrics.events_generated,
			active_runways={k: v.direction.value for k, v in sim.metrics.final_configuration.items()},
			latency_seconds=latency,
		)

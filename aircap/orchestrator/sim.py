from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from aircap.airport.models import Airport
from aircap.config import Config
from aircap.events.events import ActiveRunwayInfo
from aircap.policies.core import Policy
from aircap.policies.policies import (
	CurfewPolicy,
	GateCapacityConstraint,
	GateCapacityPolicy,
	IntelligentMaintenancePolicy,
	IntelligentMaintenanceSchedule,
	MaintenancePolicy,
	MaintenanceSchedule,
	RotationSchedule,
	RotationStrategy,
	RunwayRotationPolicy,
	ScheduledWindPolicy,
	TaxiTimeConfiguration,
	TaxiTimePolicy,
	WindChange,
	WindPolicy,
)
from aircap.simulation.engine import Engine
from aircap.simulation.world import World
from aircap.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass
class SimulationMetrics:
	total_capacity: float = 0.0
	events_generated: Dict[str, int] = field(default_factory=dict)
	events_processed: int = 0
	final_configuration: Dict[str, ActiveRunwayInfo] = field(default_factory=dict)


class Simulation:
	"""Airport plus the policies that shape its year.

	The airport is validated here, and each ``add_*`` method validates its
	parameters immediately, so a broken simulation never starts running.
	"""

	def __init__(self, airport: Airport, config: Optional[Config] = None) -> None:
		airport.validate()
		self.airport = airport
		self.config = config or Config()
		self.policies: List[Policy] = []
		self.metrics = SimulationMetrics()

	def add_policy(self, policy: Policy) -> "Simulation":
		self.policies.append(policy)
		return self

	def add_curfew_policy(self, start: datetime, end: datetime) -> "Simulation":
		return self.add_policy(CurfewPolicy(start, end, max_duration=timedelta(days=self.config.max_curfew_days)))

	def add_maintenance_policy(self, schedule: MaintenanceSchedule) -> "Simulation":
		return self.add_policy(MaintenancePolicy(schedule))

	def add_intelligent_maintenance_policy(self, schedule: IntelligentMaintenanceSchedule) -> "Simulation":
		return self.add_policy(IntelligentMaintenancePolicy(schedule))

	def add_rotation_policy(self, strategy: RotationStrategy, schedule: Optional[RotationSchedule] = None) -> "Simulation":
		return self.add_policy(RunwayRotationPolicy(strategy, schedule=schedule))

	def add_gate_capacity_policy(self, constraint: GateCapacityConstraint) -> "Simulation":
		return self.add_policy(GateCapacityPolicy(constraint))

	def add_taxi_time_policy(self, config: TaxiTimeConfiguration) -> "Simulation":
		return self.add_policy(TaxiTimePolicy(config))

	def add_wind_policy(self, speed_knots: float, direction_true: float) -> "Simulation":
		return self.add_policy(WindPolicy(speed_knots, direction_true))

	def add_scheduled_wind_policy(self, schedule: Sequence[WindChange]) -> "Simulation":
		return self.add_policy(ScheduledWindPolicy(schedule))

	def build_world(self) -> World:
		return World(
			self.airport,
			self.config.start_time,
			self.config.end_time,
			reference_duration_seconds=self.config.reference_duration_seconds,
		)

	def generate_events(self, world: World) -> None:
		"""Run every policy concurrently against the shared event queue.

		All policies run to completion. The first failure observed is raised;
		later ones are only logged.
		"""
		if not self.policies:
			return
		for policy in self.policies:
			policy.events_generated = 0

		first_error: Optional[BaseException] = None
		workers = max(1, min(self.config.policy_workers, len(self.policies)))
		with ThreadPoolExecutor(max_workers=workers) as pool:
			futures = {pool.submit(policy.generate_events, world): policy for policy in self.policies}
			for fut in as_completed(futures):
				policy = futures[fut]
				err = fut.exception()
				if err is None:
					logger.info("Policy %s generated %d events", policy.name, policy.events_generated)
				elif first_error is None:
					logger.error("Policy %s failed: %s", policy.name, err)
					first_error = err
				else:
					logger.warning("Policy %s also failed: %s", policy.name, err)

		if first_error is not None:
			raise first_error

	def run(self) -> float:
		world = self.build_world()
		logger.info("Generating events for %d policies...", len(self.policies))
		self.generate_events(world)

		engine = Engine(integrate_active_configuration=self.config.integrate_active_configuration)
		total = engine.calculate(world)

		self.metrics = SimulationMetrics(
			total_capacity=total,
			events_generated={p.name: p.events_generated for p in self.policies},
			events_processed=engine.events_processed,
			final_configuration=world.get_active_runway_configuration(),
		)
		return total

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone


@dataclass
class Config:
	# Simulation window
	start_time: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=timezone.utc))
	simulation_days: int = 365

	# Reference duration used to rank compatible runway sets (seconds)
	reference_duration_seconds: float = 3600.0

	# Policy limits
	max_curfew_days: int = 30

	# Number of threads used to generate policy events
	policy_workers: int = 4

	# Integrate over the active runway configuration instead of every available runway
	integrate_active_configuration: bool = False

	@property
	def end_time(self) -> datetime:
		return self.start_time + timedelta(days=self.simulation_days)

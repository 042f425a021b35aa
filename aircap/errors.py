class CapacityError(Exception):
	"""Base class for every error raised by a capacity simulation run."""


class ConfigurationError(CapacityError, ValueError):
	"""Invalid airport, policy or world parameters, detected before the run starts."""


class UnknownRunwayError(CapacityError, LookupError):
	def __init__(self, runway_id: str) -> None:
		super().__init__(f"runway {runway_id} not found")
		self.runway_id = runway_id

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import networkx as nx

from aircap.errors import ConfigurationError


class RunwayCompatibility:
	"""Which runways may operate simultaneously.

	``compatible_with`` maps a runway designation to the designations it can run
	alongside. ``None`` means every runway is compatible with every other one.
	The graph is read-only once the airport is configured.
	"""

	def __init__(self, compatible_with: Optional[Dict[str, List[str]]]) -> None:
		self.compatible_with = None if compatible_with is None else {k: list(v) for k, v in compatible_with.items()}

	def validate(self, runway_ids: Iterable[str]) -> None:
		if self.compatible_with is None:
			return
		valid = set(runway_ids)

		for runway_id, compatible in self.compatible_with.items():
			if runway_id not in valid:
				raise ConfigurationError(f"compatibility graph references non-existent runway: {runway_id}")
			for other in compatible:
				if other == runway_id:
					continue
				if other not in valid:
					raise ConfigurationError(f"runway {runway_id} references non-existent compatible runway: {other}")
				reverse = self.compatible_with.get(other)
				if reverse is None:
					raise ConfigurationError(
						f"asymmetric compatibility: {runway_id} lists {other} as compatible, but {other} has no compatibility list"
					)
				if runway_id not in reverse:
					raise ConfigurationError(
						f"asymmetric compatibility: {runway_id} lists {other} as compatible, but {other} does not list {runway_id}"
					)

		for runway_id in valid:
			if runway_id not in self.compatible_with:
				raise ConfigurationError(f"runway {runway_id} is not in the compatibility graph")

	def is_compatible(self, a: str, b: str) -> bool:
		if self.compatible_with is None or a == b:
			return True
		return b in self.compatible_with.get(a, [])

	def compatible_runways(self, runway_id: str, all_ids: Iterable[str]) -> List[str]:
		if self.compatible_with is None:
			return [i for i in all_ids if i != runway_id]
		return list(self.compatible_with.get(runway_id, []))

	def to_graph(self, all_ids: Iterable[str]) -> nx.Graph:
		all_ids = list(all_ids)
		g = nx.Graph()
		g.add_nodes_from(all_ids)
		for runway_id in all_ids:
			for other in self.compatible_runways(runway_id, all_ids):
				if other != runway_id and other in g:
					g.add_edge(runway_id, other)
		return g

	def __repr__(self) -> str:
		if self.compatible_with is None:
			return "RunwayCompatibility{all runways compatible}"
		lines = [f"  {k}: [{', '.join(sorted(self.compatible_with[k]))}]" for k in sorted(self.compatible_with)]
		return "RunwayCompatibility{\n" + "\n".join(lines) + "\n}"

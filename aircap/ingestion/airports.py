from __future__ import annotations

from datetime import timedelta
from typing import Dict, List, Optional

import pandas as pd

from aircap.airport.compatibility import RunwayCompatibility
from aircap.airport.models import Airport, Runway, SurfaceType
from aircap.errors import ConfigurationError


REQUIRED_COLUMNS = ["designation", "true_bearing", "separation_s"]
OPTIONAL_DEFAULTS = {
	"length_m": 0.0,
	"width_m": 0.0,
	"surface": SurfaceType.ASPHALT.value,
	"elevation_m": 0.0,
	"gradient_percent": 0.0,
	"crosswind_limit_kt": 0.0,
	"tailwind_limit_kt": 0.0,
}


def airport_from_frame(runways: pd.DataFrame, name: str, **details: str) -> Airport:
	"""Build a validated airport from a runway table.

	One row per runway. An optional ``compatible_with`` column lists the
	designations a runway can operate with, separated by ``;``. Without that
	column every runway is compatible with every other one.
	"""
	missing = [c for c in REQUIRED_COLUMNS if c not in runways.columns]
	if missing:
		raise ConfigurationError(f"runway table is missing columns: {', '.join(missing)}")

	df = runways.copy()
	for col, default in OPTIONAL_DEFAULTS.items():
		if col not in df.columns:
			df[col] = default
		else:
			df[col] = df[col].fillna(default)
	df["designation"] = df["designation"].astype(str).str.strip()

	rows: List[Runway] = []
	for _, row in df.iterrows():
		try:
			surface = SurfaceType(str(row["surface"]).strip().lower())
		except ValueError:
			raise ConfigurationError(f"runway {row['designation']} has unknown surface: {row['surface']}") from None
		rows.append(Runway(
			designation=row["designation"],
			true_bearing=float(row["true_bearing"]),
			minimum_separation=timedelta(seconds=float(row["separation_s"])),
			length_m=float(row["length_m"]),
			width_m=float(row["width_m"]),
			surface=surface,
			elevation_m=float(row["elevation_m"]),
			gradient_percent=float(row["gradient_percent"]),
			crosswind_limit_kt=float(row["crosswind_limit_kt"]),
			tailwind_limit_kt=float(row["tailwind_limit_kt"]),
		))

	compatibility: Optional[RunwayCompatibility] = None
	if "compatible_with" in df.columns:
		graph: Dict[str, List[str]] = {}
		for _, row in df.iterrows():
			cell = row["compatible_with"]
			ids = [] if pd.isna(cell) else [s.strip() for s in str(cell).split(";") if s.strip()]
			graph[row["designation"]] = ids
		compatibility = RunwayCompatibility(graph)

	airport = Airport(name=name, runways=rows, compatibility=compatibility, **details)
	airport.validate()
	return airport


def load_airport_csv(path: str, name: str, **details: str) -> Airport:
	# Designations such as "09" must not be parsed as numbers
	frame = pd.read_csv(path, dtype={"designation": str, "compatible_with": str})
	return airport_from_frame(frame, name, **details)


def sample_airport() -> Airport:
	"""Four-runway demonstration airport: three east-west parallels and a crossing runway."""
	runways = pd.DataFrame(
		{
			"designation": ["09L", "09R", "18", "08"],
			"true_bearing": [86.0, 86.0, 176.0, 80.0],
			"length_m": [3685.0, 3380.0, 2743.0, 2438.0],
			"width_m": [60.0, 45.0, 45.0, 45.0],
			"surface": ["asphalt", "asphalt", "concrete", "asphalt"],
			"elevation_m": [15.0, 12.0, 14.0, 10.0],
			"gradient_percent": [0.1, 0.05, 0.15, 0.08],
			"crosswind_limit_kt": [38.0, 35.0, 33.0, 30.0],
			"tailwind_limit_kt": [10.0, 10.0, 8.0, 8.0],
			"separation_s": [75.0, 60.0, 50.0, 45.0],
			"compatible_with": ["09R;08", "09L;08", None, "09L;09R"],
		}
	)
	return airport_from_frame(
		runways,
		"Metropolitan International Airport",
		iata_code="MIA",
		icao_code="KMIA",
		city="Metropolitan City",
		country="United States",
	)

import json
from datetime import datetime, time, timedelta, timezone
from typing import Optional, Tuple

import click

from aircap.airport.models import Airport
from aircap.config import Config
from aircap.errors import CapacityError
from aircap.ingestion.airports import load_airport_csv, sample_airport
from aircap.orchestrator.pipeline import CapacityPipeline, Scenario
from aircap.policies.policies import MaintenanceSchedule, RotationStrategy
from aircap.simulation.runway_manager import RunwayManager


def _load_airport(csv_path: Optional[str], name: str) -> Airport:
	if csv_path is None:
		return sample_airport()
	return load_airport_csv(csv_path, name)


def _parse_curfew(value: str, start: datetime) -> Tuple[datetime, datetime]:
	try:
		begin, end = (time.fromisoformat(part.strip()) for part in value.split("-"))
	except ValueError:
		raise click.BadParameter("expected HH:MM-HH:MM", param_hint="--curfew") from None
	curfew_start = datetime.combine(start.date(), begin, tzinfo=start.tzinfo)
	curfew_end = datetime.combine(start.date(), end, tzinfo=start.tzinfo)
	if curfew_end <= curfew_start:
		curfew_end += timedelta(days=1)
	return curfew_start, curfew_end


def _parse_maintenance(value: str) -> MaintenanceSchedule:
	try:
		runway, hours, every = value.split(":")
		return MaintenanceSchedule([runway], timedelta(hours=float(hours)), timedelta(hours=float(every)))
	except ValueError:
		raise click.BadParameter("expected RUNWAY:DURATION_H:EVERY_H", param_hint="--maintenance") from None


@click.group()
def main() -> None:
	"""Airport capacity simulation CLI."""
	pass


@main.command()
@click.option("--runways", "csv_path", type=click.Path(exists=True, dir_okay=False), default=None, help="Runway table (CSV). Defaults to the sample airport.")
@click.option("--name", default="Custom Airport", show_default=True)
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), default="2024-01-01", show_default=True)
@click.option("--days", type=int, default=365, show_default=True)
@click.option("--curfew", default=None, help="Daily curfew as HH:MM-HH:MM.")
@click.option("--wind-speed", type=float, default=None)
@click.option("--wind-direction", type=float, default=0.0, show_default=True)
@click.option("--rotation", type=click.Choice([s.value for s in RotationStrategy]), default=RotationStrategy.NO_ROTATION.value, show_default=True)
@click.option("--maintenance", multiple=True, help="RUNWAY:DURATION_H:EVERY_H, repeatable.")
@click.option("--gates", type=int, default=None)
@click.option("--turnaround", type=float, default=45.0, show_default=True, help="Average gate turnaround (minutes).")
@click.option("--taxi-in", type=float, default=0.0, show_default=True)
@click.option("--taxi-out", type=float, default=0.0, show_default=True)
@click.option("--active-config", is_flag=True, help="Integrate over the selected runway configuration only.")
def run(csv_path, name, start, days, curfew, wind_speed, wind_direction, rotation, maintenance, gates, turnaround, taxi_in, taxi_out, active_config) -> None:
	"""Run one capacity simulation and print a JSON summary."""
	start = start.replace(tzinfo=timezone.utc)
	cfg = Config(start_time=start, simulation_days=days, integrate_active_configuration=active_config)
	scenario = Scenario(
		curfew=_parse_curfew(curfew, start) if curfew else None,
		wind=(wind_speed, wind_direction) if wind_speed is not None else None,
		rotation=RotationStrategy(rotation),
		maintenance=[_parse_maintenance(m) for m in maintenance],
		total_gates=gates,
		turnaround_minutes=turnaround,
		taxi_in_minutes=taxi_in,
		taxi_out_minutes=taxi_out,
	)
	try:
		airport = _load_airport(csv_path, name)
		output = CapacityPipeline(cfg).run_once(airport, scenario)
	except CapacityError as err:
		raise click.ClickException(str(err)) from err

	result = {
		"airport": airport.name,
		"annual_capacity": round(output.annual_capacity, 2),
		"daily_average": round(output.daily_average, 2),
		"events_processed": output.events_processed,
		"events_generated": output.events_generated,
		"active_runways": output.active_runways,
		"latency_seconds": output.latency_seconds,
	}
	click.echo(json.dumps(result, indent=2))


@main.command()
@click.option("--runways", "csv_path", type=click.Path(exists=True, dir_okay=False), default=None)
@click.option("--name", default="Custom Airport", show_default=True)
def cliques(csv_path, name) -> None:
	"""List the maximal sets of runways that can operate together."""
	try:
		airport = _load_airport(csv_path, name)
	except CapacityError as err:
		raise click.ClickException(str(err)) from err
	manager = RunwayManager(airport.runways, airport.compatibility)
	rows = [
		{"runways": clique, "movements_per_hour": round(manager.configuration_capacity(clique), 2)}
		for clique in manager.maximal_cliques()
	]
	click.echo(json.dumps(rows, indent=2))


if __name__ == "__main__":
	main()

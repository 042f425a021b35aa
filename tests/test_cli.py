import json

import pytest
from click.testing import CliRunner

from aircap.cli import main


def test_run_sample_airport_one_day():
	result = CliRunner().invoke(main, ["run", "--days", "1"])
	assert result.exit_code == 0, result.output
	out = json.loads(result.output)
	assert out["airport"] == "Metropolitan International Airport"
	# 48 + 60 + 72 + 80 movements/hour from the four runways
	assert out["annual_capacity"] == pytest.approx(260 * 24)
	assert out["events_generated"] == {"RunwayRotationPolicy(NoRotation)": 1}


def test_run_with_curfew_and_csv(tmp_path):
	csv = tmp_path / "runways.csv"
	csv.write_text("designation,true_bearing,separation_s\n09,90,60\n")
	result = CliRunner().invoke(main, ["run", "--runways", str(csv), "--name", "Strip", "--days", "2", "--curfew", "23:00-06:00"])
	assert result.exit_code == 0, result.output
	out = json.loads(result.output)
	assert out["airport"] == "Strip"
	# Still inside the last curfew when the window closes
	assert out["active_runways"] == {}
	# Closed 00:00-06:00 and 23:00-06:00 then 23:00-24:00
	assert out["annual_capacity"] == pytest.approx((48 - 14) * 60)


def test_unknown_maintenance_runway_is_reported():
	result = CliRunner().invoke(main, ["run", "--days", "1", "--maintenance", "27X:4:24"])
	assert result.exit_code == 1
	assert "runway 27X not found" in result.output


def test_bad_curfew_format():
	result = CliRunner().invoke(main, ["run", "--curfew", "late"])
	assert result.exit_code == 2


def test_cliques_command():
	result = CliRunner().invoke(main, ["cliques"])
	assert result.exit_code == 0, result.output
	rows = json.loads(result.output)
	assert rows[0]["runways"] == ["09L", "09R", "08"]
	assert rows[0]["movements_per_hour"] == pytest.approx(188)
	assert rows[1] == {"runways": ["18"], "movements_per_hour": 72.0}


def test_cliques_keeps_leading_zero_designations(tmp_path):
	csv = tmp_path / "runways.csv"
	csv.write_text("designation,true_bearing,separation_s,compatible_with\n09,90,60,27\n27,270,90,09\n")
	result = CliRunner().invoke(main, ["cliques", "--runways", str(csv)])
	assert result.exit_code == 0, result.output
	assert json.loads(result.output) == [{"runways": ["09", "27"], "movements_per_hour": 100.0}]

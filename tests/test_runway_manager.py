import threading
from datetime import timedelta

from aircap.airport.compatibility import RunwayCompatibility
from aircap.airport.models import Runway
from aircap.events.events import Direction, OperationType
from aircap.simulation.runway_manager import RunwayManager


def _runway(designation, separation_s, bearing=90.0, crosswind=0.0, tailwind=0.0):
	return Runway(designation, bearing, timedelta(seconds=separation_s), crosswind_limit_kt=crosswind, tailwind_limit_kt=tailwind)


def test_cliques_of_chain_and_isolated_runway():
	runways = [_runway(d, 60) for d in "ABCD"]
	compat = RunwayCompatibility({"A": ["B"], "B": ["A", "C"], "C": ["B"], "D": []})
	mgr = RunwayManager(runways, compat)
	cliques = sorted(sorted(c) for c in mgr.maximal_cliques())
	assert cliques == [["A", "B"], ["B", "C"], ["D"]]


def test_selects_highest_capacity_clique():
	runways = [_runway("09L", 120), _runway("09R", 120), _runway("18", 48)]
	compat = RunwayCompatibility({"09L": ["09R"], "09R": ["09L"], "18": []})
	mgr = RunwayManager(runways, compat)
	# 30 + 30 movements/hour for the parallels, 75 for the crossing runway
	assert set(mgr.get_active_configuration()) == {"18"}


def test_tie_prefers_fewer_runways():
	runways = [_runway("09L", 120), _runway("09R", 120), _runway("18", 60)]
	compat = RunwayCompatibility({"09L": ["09R"], "09R": ["09L"], "18": []})
	mgr = RunwayManager(runways, compat)
	assert set(mgr.get_active_configuration()) == {"18"}


def test_no_graph_uses_every_available_runway():
	runways = [_runway(d, 60) for d in "ABC"]
	mgr = RunwayManager(runways)
	assert set(mgr.get_active_configuration()) == {"A", "B", "C"}
	mgr.on_runway_unavailable("B")
	assert set(mgr.get_active_configuration()) == {"A", "C"}


def test_unavailable_runway_excludes_its_cliques():
	runways = [_runway("A", 60), _runway("B", 60), _runway("C", 90)]
	compat = RunwayCompatibility({"A": ["B"], "B": ["A"], "C": []})
	mgr = RunwayManager(runways, compat)
	assert set(mgr.get_active_configuration()) == {"A", "B"}
	mgr.on_runway_unavailable("A")
	assert set(mgr.get_active_configuration()) == {"C"}
	mgr.on_runway_available("A")
	assert set(mgr.get_active_configuration()) == {"A", "B"}


def test_curfew_empties_configuration():
	mgr = RunwayManager([_runway("A", 60)])
	mgr.on_curfew_changed(True)
	assert mgr.get_active_configuration() == {}
	mgr.on_curfew_changed(False)
	assert set(mgr.get_active_configuration()) == {"A"}


def test_all_runways_unavailable_gives_empty_configuration():
	mgr = RunwayManager([_runway("A", 60)], RunwayCompatibility({"A": []}))
	mgr.on_runway_unavailable("A")
	assert mgr.get_active_configuration() == {}


def test_returned_configuration_is_a_copy():
	mgr = RunwayManager([_runway("A", 60)])
	config = mgr.get_active_configuration()
	config["A"].direction = Direction.REVERSE
	del config["A"]
	fresh = mgr.get_active_configuration()
	assert fresh["A"].direction == Direction.FORWARD
	assert fresh["A"].operation_type == OperationType.MIXED


def test_crosswind_excludes_runway_in_both_directions():
	mgr = RunwayManager([_runway("09", 60, bearing=90, crosswind=35)])
	mgr.on_wind_changed(40, 180)
	assert mgr.get_active_configuration() == {}
	# 45 degrees off: about 28 kt of crosswind
	mgr.on_wind_changed(40, 135)
	assert set(mgr.get_active_configuration()) == {"09"}


def test_runway_without_limits_ignores_wind():
	mgr = RunwayManager([_runway("09", 60, bearing=90)])
	mgr.on_wind_changed(60, 180)
	assert set(mgr.get_active_configuration()) == {"09"}


def test_wind_filter_falls_back_to_other_clique():
	runways = [_runway("09", 60, bearing=90, crosswind=20), _runway("18", 90, bearing=180, crosswind=20)]
	compat = RunwayCompatibility({"09": [], "18": []})
	mgr = RunwayManager(runways, compat)
	assert set(mgr.get_active_configuration()) == {"09"}
	mgr.on_wind_changed(30, 0)
	assert set(mgr.get_active_configuration()) == {"18"}


def test_direction_follows_headwind():
	mgr = RunwayManager([_runway("09", 60, bearing=90)])
	assert mgr.get_active_configuration()["09"].direction == Direction.FORWARD
	mgr.on_wind_changed(15, 270)
	assert mgr.get_active_configuration()["09"].direction == Direction.REVERSE
	mgr.on_wind_changed(15, 80)
	assert mgr.get_active_configuration()["09"].direction == Direction.FORWARD


def test_direction_uses_only_usable_end():
	mgr = RunwayManager([_runway("09", 60, bearing=90, crosswind=30, tailwind=5)])
	# Light tailwind on the forward end is above the limit
	mgr.on_wind_changed(8, 260)
	assert mgr.get_active_configuration()["09"].direction == Direction.REVERSE


def test_configuration_capacity():
	runways = [_runway("A", 60), _runway("B", 90)]
	mgr = RunwayManager(runways, reference_duration_seconds=3600)
	assert mgr.configuration_capacity(["A", "B"]) == 100
	assert mgr.configuration_capacity(["missing"]) == 0


def test_concurrent_notifications_leave_consistent_state():
	runways = [_runway(d, 60) for d in "ABCD"]
	compat = RunwayCompatibility({"A": ["B"], "B": ["A"], "C": ["D"], "D": ["C"]})
	mgr = RunwayManager(runways, compat)
	valid = {frozenset(), frozenset("AB"), frozenset("CD")}
	seen = []

	def toggle(rid):
		for i in range(100):
			if i % 2:
				mgr.on_runway_available(rid)
			else:
				mgr.on_runway_unavailable(rid)

	def read():
		for _ in range(200):
			seen.append(frozenset(mgr.get_active_configuration()))

	threads = [threading.Thread(target=toggle, args=(rid,)) for rid in "ABCD"]
	threads += [threading.Thread(target=read) for _ in range(2)]
	for t in threads:
		t.start()
	for t in threads:
		t.join()

	assert all(s in valid for s in seen)
	assert set(mgr.get_active_configuration()) in ({"A", "B"}, {"C", "D"})

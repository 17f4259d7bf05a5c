# FILE: tests/test_motion.py
import math
from dataclasses import replace

import pytest

from environment import Point, Obstacle, Target
from simulation.motion import AgentMotionController, MotionSettings
from system_state import Ant, make_ant
from utils.seeding import get_rng
from config import VARIANTS

@pytest.fixture
def settings():
    """Round-number movement constants so expected positions are easy to read."""
    return MotionSettings(
        transit_speeds={"walk": 2.0, "climb": 1.5, "hitchhike": 4.0},
        arrival_threshold=2.0,
        foraging_enabled=False,
        forage_speed=1.0,
        forage_speed_jitter=0.5,
        forage_arrival_threshold=1.0,
        obstacle_radius=4.0,
        wander_step=0.5,
        explore_step=1.0,
        origin=(0.0, 0.0),
    )

@pytest.fixture
def controller(settings):
    return AgentMotionController(settings, get_rng(1))

@pytest.fixture
def forager(settings):
    return AgentMotionController(replace(settings, foraging_enabled=True), get_rng(1))

@pytest.fixture
def ant():
    return make_ant("ant-1", 0.0, 0.0, trail_window=10)

# --- Explicit-path mode ---

def test_follows_path_until_arrival(controller, ant):
    ant = replace(ant, planned_path=[Point(0, 0), Point(10, 0)], is_moving=True)
    positions = []
    for _ in range(50):
        ant = controller.tick(ant, [], [])
        positions.append((ant.x, ant.y))
        if not ant.is_moving:
            break

    assert positions == [(0, 0), (2, 0), (4, 0), (6, 0), (8, 0), (10, 0), (10, 0)]
    assert ant.planned_path == []
    assert ant.current_waypoint_index == 0

def test_advances_waypoint_index_inside_threshold(controller, ant):
    ant = replace(ant, planned_path=[Point(1, 0), Point(50, 0)], is_moving=True)
    ant = controller.tick(ant, [], [])
    assert ant.current_waypoint_index == 1
    assert ant.is_moving
    assert (ant.x, ant.y) == (0, 0)

@pytest.mark.parametrize("mode, expected_x", [("walk", 2.0), ("climb", 1.5), ("hitchhike", 4.0), ("teleport", 2.0)])
def test_speed_depends_on_transit_mode(controller, ant, mode, expected_x):
    ant = replace(ant, planned_path=[Point(100, 0)], is_moving=True)
    moved = controller.tick(ant, [], [], mode=mode)
    assert moved.x == pytest.approx(expected_x)
    assert moved.y == pytest.approx(0.0)

def test_heading_follows_the_waypoint(controller, ant):
    ant = replace(ant, planned_path=[Point(0, 100)], is_moving=True)
    assert controller.tick(ant, [], []).heading == pytest.approx(math.pi / 2)

def test_step_never_overshoots_the_waypoint(controller, ant):
    ant = replace(ant, planned_path=[Point(3, 0)], is_moving=True)
    moved = controller.tick(ant, [], [], mode="hitchhike")
    assert (moved.x, moved.y) == (3.0, 0.0)

def test_tick_does_not_mutate_its_input(controller, ant):
    ant = replace(ant, planned_path=[Point(100, 0)], is_moving=True)
    controller.tick(ant, [], [])
    assert (ant.x, ant.y) == (0.0, 0.0)
    assert len(ant.trail) == 0
    assert ant.planned_path == [Point(100, 0)]

def test_path_to_own_position_has_no_nan(controller, ant):
    ant = replace(ant, planned_path=[Point(0, 0)], is_moving=True, heading=1.0)
    moved = controller.tick(ant, [], [])
    assert not moved.is_moving
    assert moved.heading == 1.0
    assert all(math.isfinite(v) for v in (moved.x, moved.y, moved.heading))

@pytest.mark.parametrize("dt", [0, -1, float('nan'), float('inf')])
def test_invalid_dt_is_treated_as_one(controller, ant, dt):
    ant = replace(ant, planned_path=[Point(100, 0)], is_moving=True)
    assert controller.tick(ant, [], [], dt=dt).x == pytest.approx(2.0)

def test_idle_ant_without_foraging_stays_put(controller, ant):
    targets = [Target("food", 10, 10, "crumb")]
    assert controller.tick(ant, targets, []) is ant

# --- Foraging mode ---

def test_forager_heads_for_nearest_food(forager, ant):
    targets = [Target("far", 100, 0, "crumb"), Target("near", 0, 50, "sugar")]
    moved = forager.tick(ant, targets, [])
    assert moved.current_target_id == "near"
    assert moved.is_moving
    assert moved.x == pytest.approx(0.0)
    assert 1.0 <= moved.y <= 1.5

def test_forager_sidesteps_near_obstacle_and_keeps_target(forager, ant):
    targets = [Target("food", 0, 50, "crumb")]
    obstacles = [Obstacle("rock", 2, -10, 10, 20)]
    ant = replace(ant, current_target_id="food")
    moved = forager.tick(ant, targets, obstacles)
    assert moved.is_moving
    assert moved.current_target_id == "food"
    assert abs(moved.x) <= 1.5 and abs(moved.y) <= 1.5

def test_sidestep_drops_a_stale_target(forager, ant):
    targets = [Target("food", 0, 50, "crumb")]
    obstacles = [Obstacle("rock", 2, -10, 10, 20)]
    ant = replace(ant, current_target_id="eaten")
    assert forager.tick(ant, targets, obstacles).current_target_id is None

def test_forager_wanders_once_it_reaches_food(forager, ant):
    moved = forager.tick(ant, [Target("food", 0.5, 0, "crumb")], [])
    assert not moved.is_moving
    assert moved.current_target_id is None
    assert abs(moved.x) <= 0.5 and abs(moved.y) <= 0.5

def test_forager_standing_on_food_has_no_nan(forager, ant):
    moved = forager.tick(ant, [Target("food", 0, 0, "crumb")], [])
    assert not moved.is_moving
    assert moved.current_target_id is None
    assert all(math.isfinite(v) for v in (moved.x, moved.y, moved.heading))

def test_non_food_targets_are_ignored(forager, ant):
    moved = forager.tick(ant, [Target("pebble", 10, 0, "pebble")], [])
    assert moved.current_target_id is None
    assert abs(moved.x) <= 1.0 and abs(moved.y) <= 1.0

def test_non_finite_targets_are_ignored(forager, ant):
    targets = [Target("bad", float('nan'), 0, "crumb"), Target("ok", 10, 0, "crumb")]
    assert forager.tick(ant, targets, []).current_target_id == "ok"

def test_explores_and_rests_without_food(forager, ant):
    moving_states = set()
    for _ in range(50):
        ant = forager.tick(ant, [], [])
        moving_states.add(ant.is_moving)
        assert ant.current_target_id is None
    assert moving_states == {True, False}

def test_trail_is_bounded(forager):
    ant = make_ant("ant-1", 0.0, 0.0, trail_window=3)
    for _ in range(10):
        ant = forager.tick(ant, [Target("food", 100, 100, "crumb")], [])
    assert len(ant.trail) == 3
    assert ant.trail[-1] == Point(ant.x, ant.y)

def test_trail_is_bounded_for_directly_built_ants():
    controller = AgentMotionController(MotionSettings.from_profile(VARIANTS["antmaps"]), get_rng(2))
    ant = Ant("a", -74.006, 40.7128)
    for _ in range(40):
        ant = controller.tick(ant, [], [])
    assert len(ant.trail) == VARIANTS["antmaps"]["trail_window"]

def test_custom_trail_window_is_kept_across_ticks(forager):
    ant = Ant("a", 0.0, 0.0, trail=[Point(i, i) for i in range(5)], trail_window=3)
    assert list(ant.trail) == [Point(2, 2), Point(3, 3), Point(4, 4)]
    for _ in range(10):
        ant = forager.tick(ant, [], [])
    assert len(ant.trail) == 3

def test_recovers_from_non_finite_position(forager):
    ant = make_ant("ant-1", float('nan'), 0.0, trail_window=5)
    ant.trail.append(Point(20.0, 20.0))
    moved = forager.tick(ant, [], [])
    assert math.isfinite(moved.x) and math.isfinite(moved.y)
    assert abs(moved.x - 20.0) <= 1.0 and abs(moved.y - 20.0) <= 1.0

def test_recovers_to_origin_without_trail(controller):
    ant = make_ant("ant-1", float('inf'), float('nan'), trail_window=5)
    ant = replace(ant, planned_path=[Point(5, 5)])
    moved = controller.tick(ant, [], [])
    assert abs(moved.x) <= 1.0 and abs(moved.y) <= 1.0
    assert moved.planned_path == []

def test_seeded_controllers_agree(settings):
    foraging = replace(settings, foraging_enabled=True)
    a = AgentMotionController(foraging, get_rng(42))
    b = AgentMotionController(foraging, get_rng(42))
    ant_a = ant_b = make_ant("ant-1", 0.0, 0.0, trail_window=5)
    targets = [Target("food", 30, 40, "crumb")]
    obstacles = [Obstacle("rock", 5, 5, 4, 4)]
    for _ in range(10):
        ant_a = a.tick(ant_a, targets, obstacles)
        ant_b = b.tick(ant_b, targets, obstacles)
    assert (ant_a.x, ant_a.y) == (ant_b.x, ant_b.y)

def test_settings_from_profile():
    settings = MotionSettings.from_profile(VARIANTS["antmaps"])
    assert settings.foraging_enabled
    assert settings.origin == (-74.006, 40.7128)
    assert settings.transit_speeds["hitchhike"] == VARIANTS["antmaps"]["transit_speeds"]["hitchhike"]

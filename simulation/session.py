# FILE: simulation/session.py
import logging
from dataclasses import asdict, replace
from typing import Callable, Dict, List, Optional

from config import VARIANTS, DEFAULT_VARIANT, DEFAULT_TRANSIT_MODE, TRANSIT_MODES, PLACEABLE_KINDS
from environment import Environment, Point, Obstacle
from path_planner import PathPlanner, estimate_route_time
from simulation.clock import SimulationClock
from simulation.motion import AgentMotionController, MotionSettings
from system_state import Ant, create_roster, snapshot_ants, diff_snapshots
from utils.geometry import is_finite_point
from utils.seeding import ensure_seed, get_rng

class SimulationSession:
    """
    Everything one running colony needs: the item store, the roster, the
    planner, the motion controller and the clock driving them.

    Lifecycle is create -> start -> stop -> dispose. Items and commands are
    only applied between ticks; a tick reads a single snapshot of the items.
    """
    def __init__(self, variant: str = DEFAULT_VARIANT, seed: Optional[int] = None,
                 environment: Optional[Environment] = None):
        if variant not in VARIANTS:
            raise ValueError(f"Unknown variant '{variant}'. Expected one of {sorted(VARIANTS)}.")
        self.variant = variant
        self.profile = VARIANTS[variant]
        self.seed = ensure_seed(seed)
        self.rng = get_rng(self.seed)
        if environment is None:
            environment = Environment.with_crumbway_items() if self.profile['seed_items'] else Environment()
        self.environment = environment
        self.planner = PathPlanner.from_profile(self.profile)
        self.controller = AgentMotionController(MotionSettings.from_profile(self.profile), self.rng)
        self.clock = SimulationClock(self.profile['tick_interval_ms'])
        self.ants: List[Ant] = create_roster(self.profile, self.rng)
        self.transit_mode = DEFAULT_TRANSIT_MODE
        self.placing_mode: Optional[str] = None
        self.disposed = False
        self._last_snapshot = snapshot_ants(self.ants)
        logging.info(f"Session created: variant={variant}, seed={self.seed}, ants={len(self.ants)}")

    # --- Ticking ---
    def tick(self) -> Dict[str, dict]:
        """One full pass over the roster, in registration order."""
        obstacles, targets = self.environment.snapshot()
        self.ants = [self.controller.tick(ant, targets, obstacles, self.transit_mode) for ant in self.ants]
        return snapshot_ants(self.ants)

    def tick_and_diff(self) -> dict:
        current = self.tick()
        diff = diff_snapshots(self._last_snapshot, current)
        self._last_snapshot = current
        return diff

    def is_idle(self) -> bool:
        """True when nothing would move on the next tick (no foraging, no ant travelling)."""
        return not self.profile['foraging_enabled'] and not any(a.is_moving or a.planned_path for a in self.ants)

    # --- Clock control ---
    @property
    def is_running(self) -> bool:
        return self.clock.is_running

    def start(self, tick_fn: Optional[Callable] = None) -> bool:
        if self.disposed:
            logging.warning("Cannot start a disposed session.")
            return False
        has_path = any(a.planned_path for a in self.ants)
        if self.profile['foraging_enabled'] and not self.environment.food_targets() and not has_path:
            logging.warning("Add some food (bread crumbs or sugar) before starting the simulation.")
            return False
        return self.clock.start(tick_fn or self.tick, self.profile['tick_interval_ms'])

    def stop(self) -> bool:
        return self.clock.stop()

    def toggle(self, tick_fn: Optional[Callable] = None) -> bool:
        """Flips the clock; returns whether the simulation is running afterwards."""
        if self.is_running:
            self.stop()
            return False
        return self.start(tick_fn)

    def reset(self) -> Dict[str, dict]:
        self.stop()
        self.ants = create_roster(self.profile, self.rng)
        self.placing_mode = None
        self._last_snapshot = snapshot_ants(self.ants)
        logging.info("--- ANT ROSTER RESET ---")
        return self._last_snapshot

    def dispose(self):
        self.stop()
        self.ants = []
        self._last_snapshot = {}
        self.disposed = True
        logging.info(f"Session ({self.variant}) disposed.")

    # --- Commands ---
    def set_transit_mode(self, mode: str) -> bool:
        if mode not in TRANSIT_MODES:
            logging.warning(f"Ignoring unknown transit mode '{mode}'.")
            return False
        self.transit_mode = mode
        return True

    def set_placing_mode(self, kind: Optional[str]) -> bool:
        if kind is not None and kind not in PLACEABLE_KINDS:
            logging.warning(f"Ignoring unknown placing mode '{kind}'.")
            return False
        self.placing_mode = kind
        return True

    def navigate_to(self, destination: Point, ant_id: Optional[str] = None) -> Dict[str, List[Point]]:
        """Plans a path from each selected ant (all of them by default) to the destination."""
        if not is_finite_point(destination.x, destination.y):
            logging.warning(f"Ignoring navigation to non-finite point {destination}.")
            return {}
        p = self.profile
        grid = self.environment.create_planning_grid(p['cell_size'], p['map_width'], p['map_height'], p['map_origin'])
        paths = {}
        for i, ant in enumerate(self.ants):
            if ant_id is not None and ant.id != ant_id:
                continue
            path = self.planner.plan(ant.position, destination, grid)
            self.ants[i] = replace(ant, planned_path=path, current_waypoint_index=0, is_moving=True)
            paths[ant.id] = path
        logging.info(f"Planned routes for {len(paths)} ant(s) to ({destination.x}, {destination.y}).")
        return paths

    def handle_map_click(self, point: Point) -> dict:
        """Places the pending item if a placing mode is set, otherwise sends the ants there."""
        if self.placing_mode is not None:
            if not is_finite_point(point.x, point.y):
                logging.warning(f"Ignoring placement at non-finite point {point}.")
                return {'action': 'ignored'}
            item = self.environment.place_item(self.placing_mode, point, self.profile['default_obstacle_size'])
            self.placing_mode = None
            kind = 'obstacle' if isinstance(item, Obstacle) else 'target'
            return {'action': 'placed', 'kind': kind, 'item': asdict(item)}
        paths = self.navigate_to(point)
        return {
            'action': 'navigating',
            'destination': (point.x, point.y),
            'waypoints': {ant_id: len(path) for ant_id, path in paths.items()},
        }

    def add_item(self, kind: str, point: Point) -> Optional[dict]:
        if kind not in PLACEABLE_KINDS or not is_finite_point(point.x, point.y):
            logging.warning(f"Ignoring placement of '{kind}' at {point}.")
            return None
        item = self.environment.place_item(kind, point, self.profile['default_obstacle_size'])
        return asdict(item)

    def remove_item(self, item_id: str) -> bool:
        return self.environment.remove_item(item_id)

    def clear_items(self):
        self.environment.clear_items()
        self.stop()

    def search_targets(self, query: str) -> List[dict]:
        return [asdict(t) for t in self.environment.search_targets(query)]

    def route_time(self, ant_id: str) -> Optional[float]:
        ant = next((a for a in self.ants if a.id == ant_id), None)
        if ant is None:
            return None
        return estimate_route_time(ant.planned_path, self.transit_mode)

    # --- Read models ---
    def stats(self) -> dict:
        obstacles, targets = self.environment.snapshot()
        return {
            'ant_count': len(self.ants),
            'active_ants': sum(1 for a in self.ants if a.is_moving),
            'food_count': sum(1 for t in targets if t.is_food),
            'obstacle_count': len(obstacles),
            'is_running': self.is_running,
            'tick_count': self.clock.tick_count,
        }

    def items(self) -> dict:
        obstacles, targets = self.environment.snapshot()
        return {'targets': [asdict(t) for t in targets], 'obstacles': [asdict(o) for o in obstacles]}

    def state(self) -> dict:
        return {
            'variant': self.variant,
            'transit_mode': self.transit_mode,
            'placing_mode': self.placing_mode,
            'items': self.items(),
            'ants': list(snapshot_ants(self.ants).values()),
            'stats': self.stats(),
        }

# FILE: simulation/motion.py
import logging
import math
from collections import deque
from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from config import DEFAULT_TRANSIT_MODE, FOOD_KINDS, REST_PROBABILITY
from environment import Obstacle, Point, Target
from system_state import Ant
from utils.geometry import calculate_distance_2d, distance_point_to_rect, heading_from_vector, is_finite_point
from utils.seeding import get_rng

@dataclass(frozen=True)
class MotionSettings:
    """Per-variant movement constants, in the variant's map units per tick."""
    transit_speeds: Dict[str, float]
    arrival_threshold: float
    foraging_enabled: bool
    forage_speed: float
    forage_speed_jitter: float
    forage_arrival_threshold: float
    obstacle_radius: float
    wander_step: float
    explore_step: float
    origin: Tuple[float, float]
    rest_probability: float = REST_PROBABILITY
    food_kinds: Tuple[str, ...] = FOOD_KINDS

    @classmethod
    def from_profile(cls, profile: dict) -> 'MotionSettings':
        return cls(
            transit_speeds=dict(profile['transit_speeds']),
            arrival_threshold=profile['arrival_threshold'],
            foraging_enabled=profile['foraging_enabled'],
            forage_speed=profile['forage_speed'],
            forage_speed_jitter=profile['forage_speed_jitter'],
            forage_arrival_threshold=profile['forage_arrival_threshold'],
            obstacle_radius=profile['obstacle_radius'],
            wander_step=profile['wander_step'],
            explore_step=profile['explore_step'],
            origin=tuple(profile['roster_origin']),
        )

class AgentMotionController:
    """
    Computes the next state of one ant per tick.

    An ant with a planned path follows it waypoint by waypoint at the transit
    mode's speed. Without a path, and with foraging enabled, it heads for the
    nearest food target, side-steps randomly near obstacles, and wanders when
    there is nothing to eat. tick() returns a new Ant and leaves its input alone.
    """
    def __init__(self, settings: MotionSettings, rng: Optional[np.random.Generator] = None):
        self.settings = settings
        self.rng = rng if rng is not None else get_rng()

    def tick(self, ant: Ant, targets: Sequence[Target], obstacles: Sequence[Obstacle],
             mode: str = DEFAULT_TRANSIT_MODE, dt: float = 1.0) -> Ant:
        if not (isinstance(dt, (int, float)) and math.isfinite(dt) and dt > 0):
            dt = 1.0
        if not is_finite_point(ant.x, ant.y):
            return self._random_walk(self._recover(ant))
        if ant.planned_path:
            return self._follow_path(ant, mode, dt)
        if self.settings.foraging_enabled:
            return self._forage(ant, targets, obstacles, dt)
        return ant

    # --- Explicit-path mode ---
    def _follow_path(self, ant: Ant, mode: str, dt: float) -> Ant:
        path = ant.planned_path
        index = min(max(ant.current_waypoint_index, 0), len(path) - 1)
        waypoint = path[index]
        dx, dy = waypoint.x - ant.x, waypoint.y - ant.y
        distance = math.hypot(dx, dy)

        if not math.isfinite(distance):
            logging.debug(f"{ant.id} dropped a path with a non-finite waypoint.")
            return self._moved(ant, ant.x, ant.y, planned_path=[], current_waypoint_index=0, is_moving=False)

        if distance < self.settings.arrival_threshold:
            index += 1
            if index >= len(path):
                logging.debug(f"{ant.id} arrived at {path[-1]}.")
                return self._moved(ant, ant.x, ant.y, planned_path=[], current_waypoint_index=0, is_moving=False)
            return self._moved(ant, ant.x, ant.y, current_waypoint_index=index, is_moving=True)

        speed = self.settings.transit_speeds.get(mode, self.settings.transit_speeds[DEFAULT_TRANSIT_MODE]) * dt
        step = min(speed, distance)
        heading = math.atan2(dy, dx)
        return self._moved(ant, ant.x + dx / distance * step, ant.y + dy / distance * step,
                           heading=heading, current_waypoint_index=index, is_moving=True)

    # --- Foraging mode ---
    def _forage(self, ant: Ant, targets: Sequence[Target], obstacles: Sequence[Obstacle], dt: float) -> Ant:
        s = self.settings
        foods = [t for t in targets if t.kind in s.food_kinds and is_finite_point(t.x, t.y)]
        if not foods:
            return self._random_walk(ant)

        position = (ant.x, ant.y)
        nearest = min(foods, key=lambda t: calculate_distance_2d(position, (t.x, t.y)))
        distance = calculate_distance_2d(position, (nearest.x, nearest.y))

        if distance <= s.forage_arrival_threshold:
            dx, dy = self.rng.uniform(-s.wander_step, s.wander_step, size=2)
            return self._moved(ant, ant.x + dx, ant.y + dy, is_moving=False, current_target_id=None)

        move_speed = (s.forage_speed + self.rng.uniform(0.0, s.forage_speed_jitter)) * dt
        if self._near_obstacle(position, obstacles):
            dx, dy = (self.rng.random(2) - 0.5) * move_speed * 2
            live_ids = {t.id for t in targets}
            target_id = ant.current_target_id if ant.current_target_id in live_ids else None
            return self._moved(ant, ant.x + dx, ant.y + dy, is_moving=True, current_target_id=target_id)

        dx = (nearest.x - ant.x) / distance * move_speed
        dy = (nearest.y - ant.y) / distance * move_speed
        return self._moved(ant, ant.x + dx, ant.y + dy, is_moving=True, current_target_id=nearest.id)

    def _near_obstacle(self, position, obstacles: Sequence[Obstacle]) -> bool:
        for obstacle in obstacles:
            if not is_finite_point(obstacle.x, obstacle.y, obstacle.width, obstacle.height):
                continue
            if distance_point_to_rect(position, obstacle.bounds) < self.settings.obstacle_radius:
                return True
        return False

    def _random_walk(self, ant: Ant) -> Ant:
        step = self.settings.explore_step
        dx, dy = self.rng.uniform(-step, step, size=2)
        is_moving = bool(self.rng.random() > self.settings.rest_probability)
        return self._moved(ant, ant.x + dx, ant.y + dy, is_moving=is_moving, current_target_id=None)

    def _recover(self, ant: Ant) -> Ant:
        """Puts an ant with a broken position back on its last good trail point."""
        last_good = next((p for p in reversed(ant.trail) if is_finite_point(p.x, p.y)), None)
        x, y = (last_good.x, last_good.y) if last_good else self.settings.origin
        logging.warning(f"{ant.id} had a non-finite position; recovered to ({x}, {y}).")
        return replace(ant, x=x, y=y, planned_path=[], current_waypoint_index=0)

    def _moved(self, ant: Ant, x: float, y: float, **changes) -> Ant:
        """New Ant at (x, y) with the position appended to its trail and heading following the move."""
        x, y = float(x), float(y)
        changes.setdefault('heading', heading_from_vector(x - ant.x, y - ant.y, fallback=ant.heading))
        trail = deque(ant.trail, maxlen=ant.trail_window)
        trail.append(Point(x, y))
        return replace(ant, x=x, y=y, trail=trail, **changes)

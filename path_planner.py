import logging
from typing import List, Optional, Tuple

from config import MAX_PLANNED_WAYPOINTS, DETOUR_STEP_MULTIPLIER, ROUTE_TIME_PER_WAYPOINT, ROUTE_TIME_FACTORS
from environment import Point, SpatialGrid
from utils.geometry import axis_sign

# (axis, sign) of the detour currently being followed along a wall
DetourState = Optional[Tuple[str, float]]

class PathPlanner:
    """
    Greedy waypoint stepper over a SpatialGrid.

    Each step moves one step_size toward the goal on both axes. A step that
    lands in an occupied cell is replaced by a single-axis detour of twice the
    step size. This is not a shortest-path search; it gives up after
    max_waypoints points and always ends the path on the goal.
    """
    def __init__(self, step_size: float, step_tolerance: Optional[float] = None,
                 max_waypoints: int = MAX_PLANNED_WAYPOINTS):
        self.step_size = step_size
        self.step_tolerance = step_size if step_tolerance is None else step_tolerance
        self.max_waypoints = max_waypoints

    @classmethod
    def from_profile(cls, profile: dict) -> 'PathPlanner':
        return cls(profile['step_size'], profile['step_tolerance'])

    def plan(self, start: Point, goal: Point, grid: SpatialGrid) -> List[Point]:
        path = [start]
        current = start
        detour: DetourState = None

        while abs(current.x - goal.x) > self.step_tolerance or abs(current.y - goal.y) > self.step_tolerance:
            if len(path) > self.max_waypoints:
                logging.warning(f"Planner hit the {self.max_waypoints}-waypoint cap before reaching {goal}. Path truncated.")
                break
            dx, dy = goal.x - current.x, goal.y - current.y
            next_point = Point(current.x + axis_sign(dx) * self.step_size,
                               current.y + axis_sign(dy) * self.step_size)
            if grid.is_occupied(next_point):
                next_point, detour = self._detour(current, dx, dy, grid, detour)
                if next_point is None:
                    logging.warning(f"Planner boxed in at {current}; jumping to goal.")
                    break
            else:
                detour = None
            path.append(next_point)
            current = next_point

        path.append(goal)
        logging.debug(f"Planned {len(path)} waypoints from {start} to {goal}.")
        return path

    def _detour(self, current: Point, dx: float, dy: float, grid: SpatialGrid,
                detour: DetourState) -> Tuple[Optional[Point], DetourState]:
        """Side-steps on the axis with the smaller remaining delta."""
        axis, delta = ('y', dy) if abs(dx) > abs(dy) else ('x', dx)
        if detour is not None and detour[0] == axis:
            preferred = detour[1]
        else:
            preferred = axis_sign(delta) or -1.0
        offset = DETOUR_STEP_MULTIPLIER * self.step_size
        for sign in (preferred, -preferred):
            if axis == 'y':
                candidate = Point(current.x, current.y + sign * offset)
            else:
                candidate = Point(current.x + sign * offset, current.y)
            if not grid.is_occupied(candidate):
                return candidate, (axis, sign)
        return None, detour

def estimate_route_time(path: List[Point], transit_mode: str) -> float:
    """Rough travel time shown next to a route: waypoint count scaled by transit mode."""
    factor = ROUTE_TIME_FACTORS.get(transit_mode, ROUTE_TIME_FACTORS['walk'])
    return round(len(path) * ROUTE_TIME_PER_WAYPOINT * factor, 1)

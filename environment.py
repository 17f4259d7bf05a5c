import math
import logging
import uuid
import numpy as np
from dataclasses import dataclass
from typing import Tuple, List, Iterable

from config import (
    FOOD_KINDS, ITEM_PRESETS, CRUMBWAY_TARGETS, CRUMBWAY_OBSTACLES,
    WEATHER_TEMPERATURE_RANGE, WEATHER_HUMIDITY_RANGE, WEATHER_MAX_WIND_SPEED,
    WEATHER_DESCRIPTIONS, WEATHER_MAIN, TRAIL_ADVISORIES
)
from utils.geometry import is_finite_point
from utils.seeding import get_rng

@dataclass(frozen=True)
class Point:
    x: float
    y: float

@dataclass(frozen=True)
class Obstacle:
    id: str
    x: float
    y: float
    width: float
    height: float
    kind: str = "furniture"
    label: str = ""

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of the rectangle."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    @property
    def is_degenerate(self) -> bool:
        return (not is_finite_point(self.x, self.y, self.width, self.height)
                or self.width <= 0 or self.height <= 0)

@dataclass(frozen=True)
class Target:
    id: str
    x: float
    y: float
    kind: str = "crumb"
    label: str = ""

    @property
    def is_food(self) -> bool:
        return self.kind in FOOD_KINDS

class SpatialGrid:
    """Boolean obstacle-occupancy grid over a rectangular map, indexed [row, col]."""
    def __init__(self, occupancy: np.ndarray, cell_size: float, origin: Tuple[float, float] = (0.0, 0.0)):
        self.occupancy = occupancy
        self.cell_size = cell_size
        self.origin = origin

    @property
    def rows(self) -> int:
        return self.occupancy.shape[0]

    @property
    def cols(self) -> int:
        return self.occupancy.shape[1]

    def cell_of(self, point: Point) -> Tuple[int, int]:
        """(col, row) index of the cell containing the point; may be out of bounds."""
        col = math.floor((point.x - self.origin[0]) / self.cell_size)
        row = math.floor((point.y - self.origin[1]) / self.cell_size)
        return col, row

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.cols and 0 <= row < self.rows

    def is_occupied(self, point: Point) -> bool:
        """Points off the map, or with non-finite coordinates, count as free."""
        if not is_finite_point(point.x, point.y):
            return False
        col, row = self.cell_of(point)
        return self.in_bounds(col, row) and bool(self.occupancy[row, col])

def build_spatial_grid(obstacles: Iterable[Obstacle], cell_size: float, map_width: float, map_height: float,
                       origin: Tuple[float, float] = (0.0, 0.0)) -> SpatialGrid:
    """
    Rasterises obstacle rectangles into a fresh occupancy grid.
    Cells a rectangle overlaps are marked; indices off the map are clipped, and
    zero-area or non-finite rectangles are skipped.
    """
    rows, cols = math.ceil(map_height / cell_size), math.ceil(map_width / cell_size)
    grid = np.full((rows, cols), False)
    ox, oy = origin
    for obstacle in obstacles:
        if obstacle.is_degenerate:
            continue
        min_x, min_y, max_x, max_y = obstacle.bounds
        min_gx, max_gx = math.floor((min_x - ox) / cell_size), math.ceil((max_x - ox) / cell_size)
        min_gy, max_gy = math.floor((min_y - oy) / cell_size), math.ceil((max_y - oy) / cell_size)
        grid[max(0, min_gy):min(rows, max_gy), max(0, min_gx):min(cols, max_gx)] = True
    return SpatialGrid(grid, cell_size, origin)

class Environment:
    """
    Holds the obstacle and target collections the simulation reads.
    Both are tuples that get replaced whole on every mutation, so a tick that
    grabbed a snapshot never sees a half-updated list.
    """
    def __init__(self, obstacles: Iterable[Obstacle] = (), targets: Iterable[Target] = ()):
        self._obstacles: Tuple[Obstacle, ...] = tuple(obstacles)
        self._targets: Tuple[Target, ...] = tuple(targets)

    @classmethod
    def with_crumbway_items(cls) -> 'Environment':
        obstacles = [Obstacle(**o) for o in CRUMBWAY_OBSTACLES]
        targets = [Target(**t) for t in CRUMBWAY_TARGETS]
        logging.info(f"Seeded environment with {len(targets)} targets and {len(obstacles)} obstacles.")
        return cls(obstacles, targets)

    @property
    def obstacles(self) -> Tuple[Obstacle, ...]:
        return self._obstacles

    @property
    def targets(self) -> Tuple[Target, ...]:
        return self._targets

    def snapshot(self) -> Tuple[Tuple[Obstacle, ...], Tuple[Target, ...]]:
        return self._obstacles, self._targets

    def food_targets(self) -> List[Target]:
        return [t for t in self._targets if t.is_food]

    def add_obstacle(self, obstacle: Obstacle) -> Obstacle:
        self._obstacles = self._obstacles + (obstacle,)
        logging.info(f"Added obstacle {obstacle.id} at ({obstacle.x}, {obstacle.y}) size {obstacle.width}x{obstacle.height}")
        return obstacle

    def add_target(self, target: Target) -> Target:
        self._targets = self._targets + (target,)
        logging.info(f"Added {target.kind} target {target.id} at ({target.x}, {target.y})")
        return target

    def place_item(self, kind: str, point: Point, obstacle_size: Tuple[float, float]):
        """Creates a target or obstacle of a placeable kind at a clicked point."""
        preset = ITEM_PRESETS[kind]
        item_id = f"{kind}-{uuid.uuid4().hex[:6]}"
        if kind == "obstacle":
            label = f"{preset['label']} {len(self._obstacles) + 1}"
            width, height = obstacle_size
            return self.add_obstacle(Obstacle(item_id, point.x, point.y, width, height, "leaf", label))
        label = f"{preset['label']} {len(self._targets) + 1}"
        return self.add_target(Target(item_id, point.x, point.y, kind, label))

    def remove_item(self, item_id: str) -> bool:
        obstacles = tuple(o for o in self._obstacles if o.id != item_id)
        targets = tuple(t for t in self._targets if t.id != item_id)
        removed = len(obstacles) != len(self._obstacles) or len(targets) != len(self._targets)
        self._obstacles, self._targets = obstacles, targets
        if removed:
            logging.info(f"Removed item {item_id}")
        return removed

    def clear_items(self):
        self._obstacles, self._targets = (), ()
        logging.info("Cleared all targets and obstacles.")

    def search_targets(self, query: str) -> List[Target]:
        needle = (query or "").strip().lower()
        return [t for t in self._targets if needle in t.label.lower()]

    def create_planning_grid(self, cell_size: float, map_width: float, map_height: float,
                             origin: Tuple[float, float] = (0.0, 0.0)) -> SpatialGrid:
        grid = build_spatial_grid(self._obstacles, cell_size, map_width, map_height, origin)
        logging.debug(f"Planning grid of size {grid.occupancy.shape} built from {len(self._obstacles)} obstacles.")
        return grid

def classify_trail_conditions(humidity: float) -> dict:
    for lower_bound, condition, description in TRAIL_ADVISORIES:
        if humidity >= lower_bound:
            return {"condition": condition, "description": description}
    return {"condition": TRAIL_ADVISORIES[-1][1], "description": TRAIL_ADVISORIES[-1][2]}

class WeatherSystem:
    """Mock weather source: randomised readings in fixed ranges, no real data."""
    def __init__(self, seed=None):
        self.rng = get_rng(seed)

    def get_report(self, lat: float, lon: float) -> dict:
        t_min, t_max = WEATHER_TEMPERATURE_RANGE
        h_min, h_max = WEATHER_HUMIDITY_RANGE
        temperature = round(t_min + self.rng.random() * (t_max - t_min))
        humidity = round(h_min + self.rng.random() * (h_max - h_min))
        wind_speed = round(self.rng.random() * WEATHER_MAX_WIND_SPEED * 10) / 10
        return {
            "temperature": int(temperature),
            "humidity": int(humidity),
            "windSpeed": float(wind_speed),
            "description": str(self.rng.choice(WEATHER_DESCRIPTIONS)),
            "main": str(self.rng.choice(WEATHER_MAIN)),
            "advisory": classify_trail_conditions(humidity),
        }

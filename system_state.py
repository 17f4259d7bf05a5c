# FILE: system_state.py

import json
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

import numpy as np

from config import DEFAULT_TRAIL_WINDOW
from environment import Point

# --- Custom JSON Encoder to handle NumPy types ---
class NumpyJSONEncoder(json.JSONEncoder):
    """JSON encoder that also accepts NumPy scalars and arrays."""
    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        return super(NumpyJSONEncoder, self).default(obj)

@dataclass
class Ant:
    """A single simulated ant. current_target_id is a key into the target collection, never the target itself."""
    id: str
    x: float
    y: float
    heading: float = 0.0
    planned_path: List[Point] = field(default_factory=list)
    current_waypoint_index: int = 0
    is_moving: bool = False
    trail: Deque[Point] = field(default_factory=deque)
    current_target_id: Optional[str] = None
    trail_window: int = DEFAULT_TRAIL_WINDOW

    def __post_init__(self):
        # Bound the trail to trail_window points
        if not isinstance(self.trail, deque) or self.trail.maxlen != self.trail_window:
            self.trail = deque(self.trail, maxlen=self.trail_window)

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    def to_snapshot(self) -> dict:
        return {
            'id': self.id,
            'x': float(self.x),
            'y': float(self.y),
            'heading': float(self.heading),
            'is_moving': bool(self.is_moving),
            'current_target_id': self.current_target_id,
            'current_waypoint_index': int(self.current_waypoint_index),
            'planned_path': [(float(p.x), float(p.y)) for p in self.planned_path],
            'trail': [(float(p.x), float(p.y)) for p in self.trail],
        }

def make_ant(ant_id: str, x: float, y: float, trail_window: int) -> Ant:
    return Ant(id=ant_id, x=float(x), y=float(y), trail_window=trail_window)

def create_roster(profile: dict, rng: np.random.Generator) -> List[Ant]:
    """
    Builds the default roster for a variant: roster_size ants placed uniformly
    inside a jitter box centred on the roster origin.
    """
    origin_x, origin_y = profile['roster_origin']
    jitter = profile['roster_jitter']
    ants = []
    for i in range(profile['roster_size']):
        offset_x, offset_y = (rng.random(2) - 0.5) * jitter
        ants.append(make_ant(f"ant-{i + 1}", origin_x + offset_x, origin_y + offset_y, profile['trail_window']))
    return ants

def snapshot_ants(ants: List[Ant]) -> Dict[str, dict]:
    return {ant.id: ant.to_snapshot() for ant in ants}

def diff_snapshots(previous: Dict[str, dict], current: Dict[str, dict]) -> dict:
    """
    Compares two roster snapshots and returns only what the renderer has to
    apply: ants that are new or changed, and ids that disappeared.
    """
    updated = [snap for ant_id, snap in current.items() if previous.get(ant_id) != snap]
    removed = [ant_id for ant_id in previous if ant_id not in current]
    return {'updated': updated, 'removed': removed}

def dumps_state(payload) -> str:
    return json.dumps(payload, cls=NumpyJSONEncoder)

import math
import numpy as np

def calculate_distance_2d(p1, p2):
    """Calculates the Euclidean distance between two 2D points."""
    return float(np.hypot(p2[0] - p1[0], p2[1] - p1[1]))

def heading_from_vector(dx, dy, fallback=0.0):
    """Returns atan2(dy, dx), or the fallback heading for a zero vector."""
    if dx == 0 and dy == 0:
        return fallback
    return math.atan2(dy, dx)

def axis_sign(delta):
    """-1, 0 or 1 depending on the sign of delta."""
    return float(np.sign(delta))

def is_finite_point(*coords):
    return all(math.isfinite(c) for c in coords)

def distance_point_to_rect(point, rect_bounds):
    """
    Distance from a point to an axis-aligned rectangle (min_x, min_y, max_x, max_y).
    Zero when the point is inside or on the edge.
    """
    x, y = point
    min_x, min_y, max_x, max_y = rect_bounds
    dx = max(min_x - x, 0.0, x - max_x)
    dy = max(min_y - y, 0.0, y - max_y)
    return float(np.hypot(dx, dy))

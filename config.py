# FILE: config.py
"""Central configuration file for the AntMaps navigation core."""

# --- Path Planner ---
MAX_PLANNED_WAYPOINTS = 100
DETOUR_STEP_MULTIPLIER = 2

# --- Transit Modes (explicit-path movement) ---
TRANSIT_MODES = ("walk", "climb", "hitchhike")
DEFAULT_TRANSIT_MODE = "walk"
ROUTE_TIME_PER_WAYPOINT = 0.1
ROUTE_TIME_FACTORS = {"walk": 1.0, "climb": 2.0, "hitchhike": 0.5}

# --- Foraging ---
FOOD_KINDS = ("crumb", "sugar", "protein", "fat", "mystery")
OBSTACLE_KINDS = ("furniture", "danger", "liquid", "leaf")
REST_PROBABILITY = 0.3

# --- Items placed from a map click ---
ITEM_PRESETS = {
    "crumb": {"emoji": "🍞", "label": "Bread Crumb"},
    "sugar": {"emoji": "🍯", "label": "Sugar Crystal"},
    "mystery": {"emoji": "🍪", "label": "Mystery Morsel"},
    "obstacle": {"emoji": "🍃", "label": "Leaf Obstacle"},
}
PLACEABLE_KINDS = tuple(ITEM_PRESETS.keys())

# --- Mock Weather ---
WEATHER_TEMPERATURE_RANGE = (15.0, 35.0)
WEATHER_HUMIDITY_RANGE = (40.0, 80.0)
WEATHER_MAX_WIND_SPEED = 15.0
WEATHER_DESCRIPTIONS = ["clear sky", "few clouds", "scattered clouds", "broken clouds", "shower rain", "rain"]
WEATHER_MAIN = ["Clear", "Clouds", "Rain"]
# Humidity lower bounds for the trail-condition advisory, highest first.
TRAIL_ADVISORIES = [
    (90, "Humid", "Slippery surfaces. Extra grip recommended."),
    (60, "Optimal", "Perfect for pheromone trails!"),
    (0, "Dry", "Trails fading quickly. Stay hydrated!"),
]

# --- Seeded CrumbWay Items ---
CRUMBWAY_TARGETS = [
    {"id": "crumb-1", "x": 150, "y": 400, "kind": "sugar", "label": "Fallen Dorito Crater"},
    {"id": "crumb-2", "x": 600, "y": 200, "kind": "protein", "label": "Cheese Crumb Valley"},
    {"id": "crumb-3", "x": 300, "y": 500, "kind": "mystery", "label": "Mysterious Sticky Spot"},
    {"id": "crumb-4", "x": 700, "y": 450, "kind": "fat", "label": "Butter Mountain"},
]
CRUMBWAY_OBSTACLES = [
    {"id": "obstacle-1", "x": 200, "y": 100, "width": 100, "height": 60, "kind": "furniture", "label": "Sofa Leg of Doom"},
    {"id": "obstacle-2", "x": 500, "y": 300, "width": 80, "height": 40, "kind": "danger", "label": "Giant Slipper Hazard"},
    {"id": "obstacle-3", "x": 100, "y": 250, "width": 60, "height": 60, "kind": "furniture", "label": "Table Leg Canyon"},
    {"id": "obstacle-4", "x": 650, "y": 100, "width": 90, "height": 30, "kind": "liquid", "label": "Water Spill Lake"},
]

# --- Variant Profiles ---
# CrumbWay works in canvas pixels, AntMaps in degrees (x = longitude, y = latitude).
VARIANTS = {
    "crumbway": {
        "map_origin": (0.0, 0.0),
        "map_width": 800.0,
        "map_height": 600.0,
        "cell_size": 10.0,
        "step_size": 10.0,
        "step_tolerance": 10.0,
        "transit_speeds": {"walk": 2.0, "climb": 1.5, "hitchhike": 4.0},
        "arrival_threshold": 2.0,
        "foraging_enabled": False,
        "forage_speed": 1.5,
        "forage_speed_jitter": 1.0,
        "forage_arrival_threshold": 1.0,
        "obstacle_radius": 4.0,
        "wander_step": 0.5,
        "explore_step": 1.0,
        "trail_window": 10,
        "tick_interval_ms": 16,
        "roster_size": 1,
        "roster_origin": (50.0, 50.0),
        "roster_jitter": 0.0,
        "default_obstacle_size": (60.0, 40.0),
        "seed_items": True,
        "auto_start_on_navigate": True,
    },
    "antmaps": {
        "map_origin": (-74.0085, 40.7103),
        "map_width": 0.005,
        "map_height": 0.005,
        "cell_size": 0.00005,
        "step_size": 0.00005,
        "step_tolerance": 0.00005,
        "transit_speeds": {"walk": 0.00002, "climb": 0.000015, "hitchhike": 0.00004},
        "arrival_threshold": 0.00002,
        "foraging_enabled": True,
        "forage_speed": 0.00003,
        "forage_speed_jitter": 0.00002,
        "forage_arrival_threshold": 0.00002,
        "obstacle_radius": 0.00008,
        "wander_step": 0.000005,
        "explore_step": 0.00001,
        "trail_window": 15,
        "tick_interval_ms": 300,
        "roster_size": 5,
        "roster_origin": (-74.006, 40.7128),
        "roster_jitter": 0.001,
        "default_obstacle_size": (0.00004, 0.00004),
        "seed_items": False,
        "auto_start_on_navigate": False,
    },
}
DEFAULT_VARIANT = "antmaps"
DEFAULT_TRAIL_WINDOW = VARIANTS[DEFAULT_VARIANT]["trail_window"]

# --- Server ---
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000
DEFAULT_STATIC_DIR = "web"

class Config:
    # Hex scale
    PIXELS_PER_UNIT = 100  # hexSize 1.0 -> 100 px radius
    HIT_RADIUS_RATIO = 0.9
    DEFAULT_HEX_SIZE = 0.8
    DEFAULT_ORIENTATION = "pointy"
    ORIENTATIONS = ("pointy", "flat")

    # Layout toggles
    DEFAULT_RECT = True
    DEFAULT_STAGGER = True
    DEFAULT_MIRROR = True

    # Tiers (0 walkable, 1 wall, 2 unmodifiable wall, 3 out of bounds)
    TIER_MIN = 0
    TIER_MAX = 3

    # Terrain
    TERRAIN_COLOURS = {
        "grass": "#52c41a",
        "water": "#1890ff",
        "sand": "#fadb14",
        "mountain": "#8c8c8c",
        "forest": "#237804",
        "swamp": "#08979c",
        "road": "#b37f4c",
    }
    FALLBACK_COLOUR = "#cccccc"
    DEFAULT_TERRAIN = "grass"

    # Markers
    GOAL_COLOUR = "#22c55e"
    SPAWN_COLOUR = "#ff4444"
    MULTI_COLOUR = "#3b82f6"
    OUTLINE_COLOUR = "#333333"
    MARKER_RADIUS_RATIO = 0.35

    # View
    WINDOW_WIDTH = 1400
    WINDOW_HEIGHT = 900
    EMPTY_BOUNDS = (800, 600)
    ZOOM_MIN = 0.3
    ZOOM_MAX = 4.0
    ZOOM_IN_STEP = 1.25
    ZOOM_OUT_STEP = 0.8
    CLICK_SLOP = 4  # px of travel before a press stops counting as a click

    # Files
    ASSET_DIR = "assets"
    DEFAULT_MAP_FILE = "bordered_map.json"
    DEFAULT_SAVE_NAME = "map.json"


def clamp_tier(value):
    return max(Config.TIER_MIN, min(Config.TIER_MAX, int(value)))

from core.config import Config, clamp_tier

PAN = "pan"
PAINT = "paint"
SELECT = "select"


class Brush:
    def __init__(self, terrain=Config.DEFAULT_TERRAIN, tier=Config.TIER_MIN):
        self.terrain = terrain
        self.tier = clamp_tier(tier)

    def set_terrain(self, terrain):
        self.terrain = terrain

    def set_tier(self, tier):
        self.tier = clamp_tier(tier)


def stroke_mode(brush_enabled, modifier, edit_mode):
    if brush_enabled and edit_mode == "terrain":
        return PAINT
    if modifier and edit_mode == "terrain":
        return SELECT
    return PAN


class StrokeSession:
    """One pointer-down to pointer-up gesture.

    The mode is fixed when the stroke starts. For paint strokes `painted`
    records tile ids written during this stroke, so each tile is written at
    most once however often the pointer crosses it.
    """

    def __init__(self, mode, start, brush=None, origin=None):
        self.mode = mode
        self.start = start
        self.origin = origin if origin is not None else start
        self.travel = 0.0
        self.brush = brush
        self.painted = set()
        self.writes = 0

    def paint(self, document, tile):
        if tile.id in self.painted:
            return False
        brush = self.brush
        if tile.matches(brush.terrain, brush.tier):
            return False
        document.update_tile(tile.id, terrain=brush.terrain, tier=brush.tier)
        self.painted.add(tile.id)
        self.writes += 1
        return True

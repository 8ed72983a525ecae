import math

from core.config import Config, clamp_tier
from core.hexmath import HexMath
from core.layout import LayoutCache, LayoutConfig
from editing.brush import PAINT, PAN, SELECT, Brush, StrokeSession, stroke_mode
from editing.markers import MarkerRegistry
from editing.selection import Selection
from mapdata.document_io import document_to_dict

EDIT_MODES = ("terrain", "spawn", "goal")
EDITABLE_FIELDS = ("terrain", "tier", "asset")


class EditorSession:
    """Everything the editing surface needs, independent of any toolkit.

    Pointer coordinates passed in are canvas (screen) pixels; they are
    mapped back through pan and zoom before hit-testing.
    """

    def __init__(self, document):
        self.rect = Config.DEFAULT_RECT
        self.stagger = Config.DEFAULT_STAGGER
        self.mirror = Config.DEFAULT_MIRROR
        self.brush = Brush()
        self.brush_enabled = False
        self.scale = 1.0
        self.offset = (0.0, 0.0)
        self.cache = LayoutCache()
        self.load_document(document)
        self.reset_view()

    # Document -------------------------------------------------------------

    def load_document(self, document):
        self.document = document
        self.markers = MarkerRegistry(document)
        self.selection = Selection()
        self.edit_mode = "terrain"
        self.stroke = None
        self.last_stroke = None

    def export_payload(self):
        return document_to_dict(self.document)

    @property
    def layout(self):
        return LayoutConfig.for_document(
            self.document, rect=self.rect, stagger=self.stagger, mirror=self.mirror
        )

    def geometry(self):
        return self.cache.get(self.document, self.layout)

    # Toggles ---------------------------------------------------------------

    def set_edit_mode(self, mode):
        if mode not in EDIT_MODES:
            raise ValueError(f"Unknown edit mode {mode!r}")
        self.edit_mode = mode

    def toggle_rect(self):
        self.rect = not self.rect

    def toggle_stagger(self):
        self.stagger = not self.stagger

    def toggle_mirror(self):
        self.mirror = not self.mirror

    def set_orientation(self, orientation):
        if orientation not in Config.ORIENTATIONS:
            raise ValueError(f"Unknown orientation {orientation!r}")
        if orientation != self.document.orientation:
            self.document.orientation = orientation
            self.document.touch()

    # View ------------------------------------------------------------------

    def zoom_in(self):
        self.scale = min(Config.ZOOM_MAX, self.scale * Config.ZOOM_IN_STEP)

    def zoom_out(self):
        self.scale = max(Config.ZOOM_MIN, self.scale * Config.ZOOM_OUT_STEP)

    def home_offset(self):
        """Pan that brings tiles left of or above the origin into view."""
        size = self.layout.size
        mx, my = self.geometry().min_corner
        return max(0.0, size - mx), max(0.0, size - my)

    def reset_view(self):
        self.scale = 1.0
        self.offset = self.home_offset()

    def view_translation(self):
        # Zoom is anchored on the centre of the map bounds.
        w, h = self.geometry().bounds
        return (
            self.offset[0] + w / 2 * (1 - self.scale),
            self.offset[1] + h / 2 * (1 - self.scale),
        )

    def canvas_to_map(self, x, y):
        tx, ty = self.view_translation()
        return (x - tx) / self.scale, (y - ty) / self.scale

    def map_to_canvas(self, x, y):
        tx, ty = self.view_translation()
        return x * self.scale + tx, y * self.scale + ty

    def tile_at(self, x, y):
        px, py = self.canvas_to_map(x, y)
        geometry = self.geometry()
        return HexMath.nearest_tile(
            px, py, self.document.tiles, geometry.layout, geometry.centers
        )

    # Pointer events ----------------------------------------------------------

    def pointer_down(self, x, y, modifier=False):
        mode = stroke_mode(self.brush_enabled, modifier, self.edit_mode)
        if mode == PAN:
            origin = (x - self.offset[0], y - self.offset[1])
        else:
            origin = (x, y)
        self.stroke = StrokeSession(mode, (x, y), brush=self.brush, origin=origin)
        if mode == PAINT:
            tile = self.tile_at(x, y)
            if tile is not None:
                self.stroke.paint(self.document, tile)
        elif mode == SELECT:
            self.selection.begin_drag()
        return self.stroke

    def pointer_move(self, x, y):
        stroke = self.stroke
        if stroke is None:
            return False
        sx, sy = stroke.start
        stroke.travel = max(stroke.travel, math.hypot(x - sx, y - sy))
        if stroke.mode == PAINT:
            tile = self.tile_at(x, y)
            return tile is not None and stroke.paint(self.document, tile)
        if stroke.mode == SELECT:
            tile = self.tile_at(x, y)
            return tile is not None and self.selection.drag_over(tile)
        self.offset = (x - stroke.origin[0], y - stroke.origin[1])
        return True

    def pointer_up(self):
        stroke = self.stroke
        self.stroke = None
        self.last_stroke = stroke
        self.selection.end_drag()
        return stroke

    pointer_leave = pointer_up

    def stroke_edited(self):
        """True if the finished stroke painted tiles or drag-selected."""
        stroke = self.last_stroke
        if stroke is None:
            return False
        return (stroke.mode == PAINT and bool(stroke.painted)) or stroke.mode == SELECT

    def release(self, x, y, modifier=False):
        """Pointer-up followed by a click when the press barely moved."""
        stroke = self.pointer_up()
        if stroke is not None and stroke.travel <= Config.CLICK_SLOP:
            return self.click(x, y, modifier)
        return None

    def click(self, x, y, modifier=False):
        tile = self.tile_at(x, y)
        if tile is None:
            return None
        if self.edit_mode == "spawn":
            self.markers.toggle_spawn(tile.q, tile.r)
        elif self.edit_mode == "goal":
            self.markers.set_goal(tile.q, tile.r)
        elif modifier:
            self.selection.toggle(tile)
        else:
            self.selection.click(tile)
        return tile

    def wheel(self, delta_y):
        """Scroll adjusts the tier of the selection, else zooms."""
        if self.edit_mode == "terrain" and self.selection.targets():
            self.nudge_tier(-1 if delta_y > 0 else 1)
        elif delta_y > 0:
            self.zoom_out()
        else:
            self.zoom_in()

    # Field edits -------------------------------------------------------------

    @property
    def focus_tile(self):
        if self.selection.focus is None:
            return None
        return self.document.get(self.selection.focus)

    def update_field(self, name, value):
        if name not in EDITABLE_FIELDS:
            raise KeyError(name)
        if self.edit_mode != "terrain":
            return 0
        changed = 0
        for tid in self.selection.targets():
            if self.document.update_tile(tid, **{name: value}):
                changed += 1
        return changed

    def nudge_tier(self, delta):
        if self.edit_mode != "terrain" or not self.selection.targets():
            return 0
        focus = self.focus_tile
        base = focus.tier if focus is not None else Config.TIER_MIN
        return self.update_field("tier", clamp_tier(base + delta))

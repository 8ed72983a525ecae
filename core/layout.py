from dataclasses import dataclass

from core.config import Config
from core.hexmath import HexMath


@dataclass(frozen=True)
class LayoutConfig:
    """Editor-wide placement toggles, passed explicitly into HexMath."""

    orientation: str = Config.DEFAULT_ORIENTATION
    rect: bool = Config.DEFAULT_RECT
    stagger: bool = Config.DEFAULT_STAGGER
    mirror: bool = Config.DEFAULT_MIRROR
    size: float = Config.DEFAULT_HEX_SIZE * Config.PIXELS_PER_UNIT
    max_r: int = 0

    @staticmethod
    def for_document(
        document,
        rect=Config.DEFAULT_RECT,
        stagger=Config.DEFAULT_STAGGER,
        mirror=Config.DEFAULT_MIRROR,
    ):
        return LayoutConfig(
            orientation=document.orientation,
            rect=rect,
            stagger=stagger,
            mirror=mirror,
            size=document.hex_size * Config.PIXELS_PER_UNIT,
            max_r=document.max_r,
        )

    @property
    def hit_radius(self):
        return self.size * Config.HIT_RADIUS_RATIO


class LayoutCache:
    """Tile centres and pixel bounds for one (document, revision, layout).

    Recomputed only when the document is replaced or mutated, or when a
    layout toggle changes.
    """

    def __init__(self):
        self._document = None
        self._key = None
        self.centers = {}
        self.bounds = Config.EMPTY_BOUNDS
        self.min_corner = (0.0, 0.0)
        self.layout = None
        self.computations = 0

    def get(self, document, layout):
        key = (document.revision, layout)
        if document is not self._document or key != self._key:
            self.centers = {t.id: HexMath.tile_center(t, layout) for t in document.tiles}
            points = list(self.centers.values())
            self.bounds = HexMath.pixel_bounds(points, layout.size)
            if points:
                self.min_corner = (min(x for x, _ in points), min(y for _, y in points))
            else:
                self.min_corner = (0.0, 0.0)
            self._document = document
            self._key = key
            self.layout = layout
            self.computations += 1
        return self

import math

from core.config import Config

SQRT3 = math.sqrt(3)


class HexMath:
    @staticmethod
    def to_pixel(q, r, size, orientation, rect, stagger, mirror, max_r):
        """Axial (q, r) to the pixel centre of the tile.

        Mirroring flips the row index around max_r; the stagger offset is
        always taken from the unmirrored r (pointy) or q (flat).
        """
        rr = max_r - r if mirror else r
        if orientation == "pointy":
            base_x = size * SQRT3 * (q if rect else q + rr / 2)
            y = size * 1.5 * rr
            if stagger:
                return base_x + (math.fmod(r, 2) * SQRT3 * size) / 2, y
            return base_x, y
        base_y = size * SQRT3 * (rr if rect else rr + q / 2)
        x = size * 1.5 * q
        if stagger:
            return x, base_y + (math.fmod(q, 2) * SQRT3 * size) / 2
        return x, base_y

    @staticmethod
    def tile_center(tile, layout):
        return HexMath.to_pixel(
            tile.q,
            tile.r,
            layout.size,
            layout.orientation,
            layout.rect,
            layout.stagger,
            layout.mirror,
            layout.max_r,
        )

    @staticmethod
    def hex_polygon(cx, cy, size, orientation):
        offset = 30 if orientation == "pointy" else 0
        points = []
        for i in range(6):
            angle_rad = math.radians(offset + 60 * i)
            points.append(
                (cx + size * math.cos(angle_rad), cy + size * math.sin(angle_rad))
            )
        return points

    @staticmethod
    def parse_hex_colour(value):
        value = value.lstrip("#")
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)

    @staticmethod
    def to_hex_colour(rgb):
        return "#" + "".join(f"{c:02x}" for c in rgb)

    @staticmethod
    def shade_colour(terrain, tier, min_tier, max_tier):
        """Blend the terrain colour toward white by the tier's position in range."""
        base = Config.TERRAIN_COLOURS.get(terrain, Config.FALLBACK_COLOUR)
        t = (tier - min_tier) / max(1, max_tier - min_tier)

        def mix(c):
            v = math.floor(c + (255 - c) * t + 0.5)
            return max(0, min(255, int(v)))

        return tuple(mix(c) for c in HexMath.parse_hex_colour(base))

    @staticmethod
    def nearest_tile(px, py, tiles, layout, centers=None):
        """Tile whose centre is strictly within the hit radius, nearest first.

        `centers` maps tile id to a precomputed centre for this layout.
        """
        closest = None
        closest_dist = math.inf
        threshold = layout.hit_radius
        for tile in tiles:
            if centers is not None:
                x, y = centers[tile.id]
            else:
                x, y = HexMath.tile_center(tile, layout)
            dist = math.hypot(px - x, py - y)
            if dist < threshold and dist < closest_dist:
                closest = tile
                closest_dist = dist
        return closest

    @staticmethod
    def pixel_bounds(centers, size):
        if not centers:
            return Config.EMPTY_BOUNDS
        return (
            max(x for x, _ in centers) + size * 2,
            max(y for _, y in centers) + size * 2,
        )

    @staticmethod
    def neighbours(q, r):
        return [
            (q + 1, r),
            (q - 1, r),
            (q, r + 1),
            (q, r - 1),
            (q + 1, r - 1),
            (q - 1, r + 1),
        ]

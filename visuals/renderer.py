from core.config import Config
from core.hexmath import HexMath


def tile_style(session, tile):
    """Outline colour and width: goal beats spawn beats multi-selection."""
    if session.markers.is_goal(tile.q, tile.r):
        return Config.GOAL_COLOUR, 4
    if session.markers.is_spawn(tile.q, tile.r):
        return Config.SPAWN_COLOUR, 4
    if tile.id in session.selection.multi:
        return Config.MULTI_COLOUR, 3
    return Config.OUTLINE_COLOUR, 1.2


def build_render_list(session):
    """Per-tile draw data in map space, back to front."""
    geometry = session.geometry()
    layout = session.layout
    min_tier, max_tier = session.document.tier_range()

    render_list = []
    for tile in session.document.tiles:
        cx, cy = geometry.centers[tile.id]
        outline, width = tile_style(session, tile)
        markers = []
        if session.markers.is_goal(tile.q, tile.r):
            markers.append(("T", Config.GOAL_COLOUR))
        if session.markers.is_spawn(tile.q, tile.r):
            markers.append(("S", Config.SPAWN_COLOUR))
        fill = HexMath.shade_colour(tile.terrain, tile.tier, min_tier, max_tier)
        render_list.append(
            {
                "tile": tile,
                "x": cx,
                "y": cy,
                "points": HexMath.hex_polygon(cx, cy, layout.size, layout.orientation),
                "fill": HexMath.to_hex_colour(fill),
                "outline": outline,
                "width": width,
                "dimmed": session.selection.is_selected(tile.id),
                "markers": markers,
            }
        )
    render_list.sort(key=lambda item: item["y"])
    return render_list


class CanvasRenderer:
    def __init__(self, asset_mgr):
        self.am = asset_mgr

    def render(self, canvas, session):
        canvas.delete("all")
        scale = session.scale
        size = session.layout.size
        for item in build_render_list(session):
            self.render_item(canvas, session, item, size * scale)

    def render_item(self, canvas, session, item, size_px):
        poly = []
        for x, y in item["points"]:
            poly.extend(session.map_to_canvas(x, y))
        cx, cy = session.map_to_canvas(item["x"], item["y"])

        canvas.create_polygon(
            poly,
            fill=item["fill"],
            outline=item["outline"],
            width=max(1, item["width"] * session.scale),
            stipple="gray75" if item["dimmed"] else "",
            tags=("hex", item["tile"].id),
        )

        img = self.am.get_tk_image(item["tile"].asset, size_px * 1.5)
        if img:
            canvas.create_image(cx, cy, image=img, tags="hex_art")

        radius = size_px * Config.MARKER_RADIUS_RATIO
        for letter, colour in item["markers"]:
            canvas.create_oval(
                cx - radius, cy - radius, cx + radius, cy + radius,
                fill=colour, outline="", tags="marker",
            )
            canvas.create_text(
                cx, cy, text=letter, fill="white",
                font=("Arial", max(6, int(size_px * 0.4)), "bold"), tags="marker",
            )

"""Render the current map to a PNG preview.

Draws the same render list the canvas uses, at zoom 1 and the home pan, so
the image covers every tile. The map JSON is embedded as a PNG text
chunk, and the editor can import a map back from such a preview.
"""

import json

from PIL import Image, ImageDraw
from PIL.PngImagePlugin import PngInfo

from core.config import Config
from mapdata.document_io import MapImportError, document_to_dict, parse_document
from visuals.renderer import build_render_list

METADATA_KEY = "hex_map_document"
BACKGROUND = "#ffffff"


def render_to_image(session):
    w, h = session.geometry().bounds
    dx, dy = session.home_offset()
    img = Image.new("RGB", (max(1, int(w + dx)), max(1, int(h + dy))), BACKGROUND)
    draw = ImageDraw.Draw(img)
    radius = session.layout.size * Config.MARKER_RADIUS_RATIO

    for item in build_render_list(session):
        draw.polygon(
            [(x + dx, y + dy) for x, y in item["points"]],
            fill=item["fill"],
            outline=item["outline"],
            width=max(1, int(round(item["width"]))),
        )
        cx, cy = item["x"] + dx, item["y"] + dy
        for letter, colour in item["markers"]:
            draw.ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=colour)
            left, top, right, bottom = draw.textbbox((0, 0), letter)
            draw.text(
                (cx - (right - left) / 2, cy - (bottom - top) / 2), letter, fill="white"
            )
    return img


def save_snapshot(session, path):
    info = PngInfo()
    info.add_text(METADATA_KEY, json.dumps(document_to_dict(session.document)))
    render_to_image(session).save(path, pnginfo=info)
    return path


def _snapshot_text(path):
    with Image.open(path) as img:
        text_data = dict(getattr(img, "text", None) or {})
    if METADATA_KEY not in text_data:
        raise MapImportError(f"PNG file does not contain a map ('{METADATA_KEY}' chunk)")
    return text_data[METADATA_KEY]


def load_snapshot_payload(path):
    """The map dict embedded in a snapshot PNG.

    Raises MapImportError if the PNG has no embedded map.
    """
    return json.loads(_snapshot_text(path))


def load_snapshot_document(path):
    return parse_document(_snapshot_text(path))

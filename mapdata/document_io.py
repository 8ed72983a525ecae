"""Read and write map documents as JSON.

The on-disk shape is::

    {"hexSize": 0.8, "orientation": "pointy",
     "map": [{"q": 0, "r": 0, "id": "hex_0_0", "terrain": "grass",
              "tier": 1, "asset": ""}, ...],
     "spawnPoints": [{"q": 0, "r": 0}],   # omitted when empty
     "worldTree": {"q": 1, "r": 0}}       # omitted when no goal

Parsing is all-or-nothing: any problem raises MapImportError before a
MapDocument is built, so the caller's current document is never touched.
"""

import json
import math
import os

from core.config import Config
from core.hexmath import HexMath
from mapdata.models import MapDocument, Tile, tile_id

DOC_FIELDS = ("hexSize", "orientation", "map", "spawnPoints", "worldTree")


class MapImportError(ValueError):
    pass


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _coord(raw, what):
    if not isinstance(raw, dict) or not _is_int(raw.get("q")) or not _is_int(raw.get("r")):
        raise MapImportError(f"{what} must be an object with integer q and r")
    return raw["q"], raw["r"]


def document_from_dict(data):
    if not isinstance(data, dict):
        raise MapImportError("Map document must be a JSON object")

    hex_size = data.get("hexSize")
    if (
        isinstance(hex_size, bool)
        or not isinstance(hex_size, (int, float))
        or (isinstance(hex_size, float) and not math.isfinite(hex_size))
        or hex_size <= 0
    ):
        raise MapImportError("hexSize must be a finite number greater than 0")

    orientation = data.get("orientation")
    if orientation not in Config.ORIENTATIONS:
        raise MapImportError(f"Unknown orientation {orientation!r}")

    raw_tiles = data.get("map")
    if not isinstance(raw_tiles, list):
        raise MapImportError("'map' must be a list of tiles")

    tiles = []
    seen_ids = set()
    seen_coords = set()
    for i, raw in enumerate(raw_tiles):
        q, r = _coord(raw, f"Tile #{i}")
        tid = raw.get("id", tile_id(q, r))
        if not isinstance(tid, str) or not tid:
            raise MapImportError(f"Tile #{i} id must be a non-empty string")
        if "tier" in raw and not _is_int(raw["tier"]):
            raise MapImportError(f"Tile {tid} tier must be an integer")
        for name in ("terrain", "asset"):
            if name in raw and not isinstance(raw[name], str):
                raise MapImportError(f"Tile {tid} {name} must be a string")
        if tid in seen_ids:
            raise MapImportError(f"Duplicate tile id {tid!r}")
        if (q, r) in seen_coords:
            raise MapImportError(f"Duplicate tile at ({q}, {r})")
        seen_ids.add(tid)
        seen_coords.add((q, r))
        tiles.append(Tile(raw))

    raw_spawns = data.get("spawnPoints") or []
    if not isinstance(raw_spawns, list):
        raise MapImportError("'spawnPoints' must be a list")
    spawns = [_coord(sp, "Spawn point") for sp in raw_spawns]

    goal = None
    if data.get("worldTree") is not None:
        goal = _coord(data["worldTree"], "worldTree")

    extra = {k: v for k, v in data.items() if k not in DOC_FIELDS}
    try:
        return MapDocument(hex_size, orientation, tiles, spawns, goal, extra)
    except ValueError as e:
        raise MapImportError(str(e)) from e


def parse_document(text):
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MapImportError(f"Invalid JSON: {e}") from e
    return document_from_dict(data)


def document_to_dict(document):
    d = {
        "hexSize": document.hex_size,
        "orientation": document.orientation,
        "map": [t.to_dict() for t in document.tiles],
    }
    d.update(document.extra)
    if document.spawn_points:
        d["spawnPoints"] = [{"q": q, "r": r} for q, r in document.spawn_points]
    if document.goal is not None:
        q, r = document.goal
        d["worldTree"] = {"q": q, "r": r}
    return d


def dump_document(document):
    return json.dumps(document_to_dict(document), indent=2)


def load_document_file(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise MapImportError(f"{os.path.basename(path)} is not a text file") from e
    return parse_document(text)


def save_document_file(document, path):
    with open(path, "w", encoding="utf-8") as f:
        f.write(dump_document(document))
    return path


def default_document():
    """Built-in seven tile map: a centre hex and its ring."""
    paint = {
        (0, 0): ("grass", 1),
        (1, 0): ("water", 0),
        (-1, 0): ("sand", 1),
        (0, 1): ("forest", 2),
        (1, -1): ("mountain", 3),
        (-1, 1): ("swamp", 0),
        (0, -1): ("road", 1),
    }
    tiles = []
    for q, r in [(0, 0)] + HexMath.neighbours(0, 0):
        terrain, tier = paint[(q, r)]
        tiles.append(
            Tile({"q": q, "r": r, "id": tile_id(q, r), "terrain": terrain,
                  "tier": tier, "asset": ""})
        )
    return MapDocument(Config.DEFAULT_HEX_SIZE, Config.DEFAULT_ORIENTATION, tiles)


def load_startup_document(path=None):
    """The map to open with: `path` if readable, else the built-in default."""
    path = path or Config.DEFAULT_MAP_FILE
    if os.path.exists(path):
        try:
            return load_document_file(path)
        except (OSError, MapImportError) as e:
            print(f"Error loading default map {path}: {e}")
    return default_document()

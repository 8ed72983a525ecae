from core.config import Config, clamp_tier

TILE_FIELDS = ("q", "r", "id", "terrain", "tier", "asset")


def tile_id(q, r):
    return f"hex_{q}_{r}"


class Tile:
    def __init__(self, data):
        self.q = data["q"]
        self.r = data["r"]
        self.id = data.get("id", tile_id(self.q, self.r))
        self.terrain = data.get("terrain", Config.DEFAULT_TERRAIN)
        self.tier = data.get("tier", Config.TIER_MIN)
        self.asset = data.get("asset", "")
        # Keys this editor doesn't know about survive a save.
        self.extra = {k: v for k, v in data.items() if k not in TILE_FIELDS}

    @property
    def coord(self):
        return self.q, self.r

    def matches(self, terrain, tier):
        return self.terrain == terrain and self.tier == tier

    def to_dict(self):
        d = {
            "q": self.q,
            "r": self.r,
            "id": self.id,
            "asset": self.asset,
            "terrain": self.terrain,
            "tier": self.tier,
        }
        d.update(self.extra)
        return d

    def __repr__(self):
        return f"Tile({self.id}, {self.terrain}/{self.tier})"


class MapDocument:
    """The single live map: tiles plus spawn/goal markers.

    Every mutation goes through this class so that `revision` moves and
    cached layout data can be invalidated.
    """

    def __init__(self, hex_size, orientation, tiles=(), spawn_points=(), goal=None,
                 extra=None):
        self.hex_size = hex_size
        self.orientation = orientation
        self.tiles = []
        self._by_id = {}
        self._by_coord = {}
        self.spawn_points = {}  # {(q, r): None}, insertion ordered
        self.goal = goal
        self.extra = dict(extra or {})
        self.revision = 0
        self._max_r = None
        for t in tiles:
            self.add_tile(t)
        for q, r in spawn_points:
            self.spawn_points[(q, r)] = None

    def add_tile(self, tile):
        if tile.id in self._by_id:
            raise ValueError(f"Duplicate tile id {tile.id!r}")
        if tile.coord in self._by_coord:
            raise ValueError(f"Duplicate tile coordinate {tile.coord}")
        self.tiles.append(tile)
        self._by_id[tile.id] = tile
        self._by_coord[tile.coord] = tile
        if self._max_r is None or tile.r > self._max_r:
            self._max_r = tile.r
        self.touch()

    def get(self, tid):
        return self._by_id.get(tid)

    def get_at(self, q, r):
        return self._by_coord.get((q, r))

    def __len__(self):
        return len(self.tiles)

    def __iter__(self):
        return iter(self.tiles)

    @property
    def max_r(self):
        # Tile coordinates are fixed once added.
        return self._max_r if self._max_r is not None else 0

    def tier_range(self):
        if not self.tiles:
            return 0, 1
        tiers = [t.tier for t in self.tiles]
        return min(tiers), max(tiers)

    def touch(self):
        self.revision += 1

    def update_tile(self, tid, **fields):
        """Set fields on one tile. Returns True if anything changed."""
        tile = self._by_id.get(tid)
        if tile is None:
            return False
        if "tier" in fields:
            fields["tier"] = clamp_tier(fields["tier"])
        changed = False
        for name, value in fields.items():
            if name not in ("terrain", "tier", "asset"):
                raise KeyError(name)
            if getattr(tile, name) != value:
                setattr(tile, name, value)
                changed = True
        if changed:
            self.touch()
        return changed

    # Markers -------------------------------------------------------------

    def has_spawn(self, q, r):
        return (q, r) in self.spawn_points

    def add_spawn(self, q, r):
        self.spawn_points[(q, r)] = None
        self.touch()

    def remove_spawn(self, q, r):
        del self.spawn_points[(q, r)]
        self.touch()

    def set_goal(self, coord):
        self.goal = coord
        self.touch()

import json

import pytest

from editing.brush import PAINT, PAN, SELECT
from editing.session import EditorSession
from mapdata.document_io import default_document, document_to_dict, parse_document
from mapdata.models import MapDocument, Tile


def _point(session, tid):
    """Canvas position of a tile's centre under the current pan/zoom."""
    return session.map_to_canvas(*session.geometry().centers[tid])


def test_hit_test_round_trips_through_pan_and_zoom():
    session = EditorSession(default_document())
    session.zoom_in()
    session.offset = (37.0, -12.0)
    for tile in session.document:
        assert session.tile_at(*_point(session, tile.id)) is tile


def test_click_routes_by_edit_mode():
    session = EditorSession(default_document())
    x, y = _point(session, "hex_1_0")

    session.click(x, y)
    assert session.selection.focus == "hex_1_0"

    session.set_edit_mode("spawn")
    session.click(x, y)
    assert session.markers.spawn_points == [(1, 0)]

    session.set_edit_mode("goal")
    session.click(x, y)
    assert session.document.goal == (1, 0)

    # Selection survives mode switches untouched.
    assert session.selection.focus == "hex_1_0"


def test_click_on_background_does_nothing():
    session = EditorSession(default_document())
    assert session.click(-5000, -5000) is None
    assert session.selection.state == "none"


def test_modifier_click_sequence():
    session = EditorSession(default_document())
    a = _point(session, "hex_0_0")
    b = _point(session, "hex_1_0")

    session.click(*a)
    session.click(*b, modifier=True)
    session.click(*a, modifier=True)

    assert session.selection.multi == {"hex_1_0"}
    assert session.selection.focus == "hex_0_0"


def test_brush_stroke_scenario():
    doc = MapDocument(
        0.8,
        "pointy",
        [
            Tile({"q": 0, "r": 0, "terrain": "grass", "tier": 1, "asset": ""}),
            Tile({"q": 1, "r": 0, "terrain": "water", "tier": 0, "asset": ""}),
        ],
    )
    session = EditorSession(doc)
    session.brush_enabled = True
    session.brush.set_terrain("water")
    session.brush.set_tier(0)
    a = _point(session, "hex_0_0")
    b = _point(session, "hex_1_0")

    stroke = session.pointer_down(*a)
    assert stroke.mode == PAINT
    session.pointer_move(*b)
    session.pointer_move(*a)
    session.pointer_move(*b)

    assert stroke.painted == {"hex_0_0"}
    assert stroke.writes == 1
    assert doc.get("hex_0_0").terrain == "water"

    session.pointer_up()
    assert session.stroke is None


def test_stroke_mode_is_fixed_at_pointer_down():
    session = EditorSession(default_document())
    a = _point(session, "hex_0_0")
    b = _point(session, "hex_1_0")

    stroke = session.pointer_down(*a, modifier=True)
    assert stroke.mode == SELECT
    # Turning the brush on mid-drag changes nothing for this stroke.
    session.brush_enabled = True
    session.pointer_move(*b)
    session.pointer_leave()

    assert session.selection.multi == {"hex_1_0"}
    assert doc_unchanged(session)
    assert session.stroke is None
    assert not session.selection.drag_selecting


def doc_unchanged(session):
    return document_to_dict(session.document) == document_to_dict(default_document())


def test_pan_moves_offset():
    session = EditorSession(default_document())
    start = session.offset
    stroke = session.pointer_down(100, 100)
    assert stroke.mode == PAN
    session.pointer_move(130, 90)
    assert session.offset == pytest.approx((start[0] + 30, start[1] - 10))


def test_release_without_travel_is_a_click():
    session = EditorSession(default_document())
    x, y = _point(session, "hex_0_1")
    session.pointer_down(x, y)
    assert session.release(x + 1, y) is session.document.get("hex_0_1")
    assert session.selection.focus == "hex_0_1"

    session.pointer_down(x, y)
    session.pointer_move(x + 200, y)
    assert session.release(x + 200, y) is None


def test_field_edit_applies_to_multi_then_single():
    session = EditorSession(default_document())
    doc = session.document
    assert session.update_field("terrain", "road") == 0

    session.click(*_point(session, "hex_0_0"))
    session.update_field("asset", "tree.png")
    assert doc.get("hex_0_0").asset == "tree.png"

    session.click(*_point(session, "hex_1_0"), modifier=True)
    session.update_field("terrain", "swamp")
    assert doc.get("hex_0_0").terrain == "swamp"
    assert doc.get("hex_1_0").terrain == "swamp"
    assert doc.get("hex_0_1").terrain == "forest"


def test_field_edits_ignored_outside_terrain_mode():
    session = EditorSession(default_document())
    session.click(*_point(session, "hex_0_0"))
    session.set_edit_mode("spawn")
    assert session.update_field("terrain", "road") == 0
    assert session.nudge_tier(1) == 0
    assert session.document.get("hex_0_0").terrain == "grass"


def test_update_field_rejects_unknown_field():
    session = EditorSession(default_document())
    with pytest.raises(KeyError):
        session.update_field("q", 3)


def test_nudge_tier_clamps_from_focus():
    session = EditorSession(default_document())
    doc = session.document
    session.click(*_point(session, "hex_1_-1"))  # tier 3
    session.nudge_tier(1)
    assert doc.get("hex_1_-1").tier == 3

    session.wheel(1)  # scroll down lowers the tier
    assert doc.get("hex_1_-1").tier == 2


def test_out_of_range_tier_is_clamped_on_next_edit():
    data = document_to_dict(default_document())
    data["map"][0]["tier"] = 9
    session = EditorSession(parse_document(json.dumps(data)))
    tid = data["map"][0]["id"]

    session.click(*_point(session, tid))
    session.nudge_tier(-1)
    assert session.document.get(tid).tier == 3


def test_wheel_zooms_without_selection():
    session = EditorSession(default_document())
    session.wheel(-1)
    assert session.scale == 1.25
    for _ in range(20):
        session.wheel(1)
    assert session.scale == pytest.approx(0.3)
    session.reset_view()
    assert session.scale == 1.0


def test_load_document_resets_selection_and_mode():
    session = EditorSession(default_document())
    session.click(*_point(session, "hex_0_0"))
    session.set_edit_mode("goal")

    replacement = parse_document(
        json.dumps(
            {
                "hexSize": 1,
                "orientation": "flat",
                "map": [{"q": 0, "r": 0, "id": "a", "terrain": "sand", "tier": 0, "asset": ""}],
                "spawnPoints": [{"q": 4, "r": 4}],
            }
        )
    )
    session.load_document(replacement)

    assert session.selection.state == "none"
    assert session.edit_mode == "terrain"
    assert session.markers.spawn_points == [(4, 4)]
    assert session.export_payload()["orientation"] == "flat"


def test_layout_cache_tracks_revision_and_toggles():
    session = EditorSession(default_document())
    cache = session.cache
    session.geometry()
    count = cache.computations

    session.geometry()
    assert cache.computations == count

    session.toggle_stagger()
    session.geometry()
    assert cache.computations == count + 1

    session.click(*_point(session, "hex_0_0"))
    session.update_field("terrain", "road")
    session.geometry()
    assert cache.computations == count + 2


def test_orientation_change_moves_tiles():
    session = EditorSession(default_document())
    before = dict(session.geometry().centers)
    session.set_orientation("flat")
    assert session.geometry().centers != before
    with pytest.raises(ValueError):
        session.set_orientation("diagonal")


def test_hit_test_reuses_cached_centres():
    session = EditorSession(default_document())
    session.geometry()
    count = session.cache.computations
    for tile in session.document:
        assert session.tile_at(*_point(session, tile.id)) is tile
    assert session.cache.computations == count


def test_max_r_follows_added_tiles():
    doc = MapDocument(1, "pointy")
    assert doc.max_r == 0
    doc.add_tile(Tile({"q": 0, "r": -2}))
    assert doc.max_r == -2
    doc.add_tile(Tile({"q": 0, "r": 3}))
    doc.add_tile(Tile({"q": 1, "r": 1}))
    assert doc.max_r == 3


def test_stroke_edited_after_drag_select_and_paint():
    session = EditorSession(default_document())
    a = _point(session, "hex_0_0")
    b = _point(session, "hex_1_0")

    session.pointer_down(*a, modifier=True)
    session.pointer_move(*b)
    assert session.release(*b, modifier=True) is None
    assert session.stroke_edited()
    assert session.focus_tile.id == "hex_1_0"

    session.pointer_down(*a)
    session.pointer_move(a[0] + 200, a[1])
    session.release(a[0] + 200, a[1])
    assert not session.stroke_edited()

    session.brush_enabled = True
    session.brush.set_terrain("road")
    session.pointer_down(*b)
    session.pointer_up()
    assert session.stroke_edited()
    assert session.focus_tile.terrain == "road"

import pytest
from PIL import Image

from core.config import Config
from editing.session import EditorSession
from mapdata.document_io import MapImportError, default_document, document_to_dict
from visuals.asset_manager import AssetManager
from visuals.renderer import build_render_list
from visuals.snapshot import (
    load_snapshot_document,
    load_snapshot_payload,
    render_to_image,
    save_snapshot,
)


def _items_by_id(session):
    return {item["tile"].id: item for item in build_render_list(session)}


def test_render_list_styles_markers_and_selection():
    session = EditorSession(default_document())
    session.markers.toggle_spawn(1, 0)
    session.markers.set_goal(0, 0)
    session.markers.toggle_spawn(0, 0)
    session.selection.toggle(session.document.get("hex_0_1"))

    items = _items_by_id(session)

    assert items["hex_0_0"]["outline"] == Config.GOAL_COLOUR
    assert items["hex_0_0"]["markers"] == [("T", Config.GOAL_COLOUR), ("S", Config.SPAWN_COLOUR)]
    assert items["hex_1_0"]["outline"] == Config.SPAWN_COLOUR
    assert items["hex_1_0"]["width"] == 4
    assert items["hex_0_1"]["outline"] == Config.MULTI_COLOUR
    assert items["hex_0_1"]["dimmed"]
    assert items["hex_-1_0"]["outline"] == Config.OUTLINE_COLOUR
    assert items["hex_-1_0"]["width"] == 1.2
    assert not items["hex_-1_0"]["dimmed"]


def test_render_list_fill_uses_tier_shading():
    session = EditorSession(default_document())
    items = _items_by_id(session)
    assert items["hex_0_0"]["fill"] == "#8cd866"  # grass tier 1 of 0..3
    assert items["hex_1_-1"]["fill"] == "#ffffff"  # tier 3 is the top of the range
    assert len(items["hex_0_0"]["points"]) == 6


def test_render_list_is_back_to_front():
    session = EditorSession(default_document())
    ys = [item["y"] for item in build_render_list(session)]
    assert ys == sorted(ys)


def test_snapshot_covers_every_tile():
    session = EditorSession(default_document())
    img = render_to_image(session)
    dx, dy = session.home_offset()

    for tile in session.document:
        cx, cy = session.geometry().centers[tile.id]
        assert 0 <= cx + dx < img.width
        assert 0 <= cy + dy < img.height

    cx, cy = session.geometry().centers["hex_0_0"]
    assert img.getpixel((int(cx + dx), int(cy + dy))) == (140, 216, 102)


def test_snapshot_embeds_map(tmp_path):
    session = EditorSession(default_document())
    session.markers.toggle_spawn(0, 1)
    path = str(tmp_path / "preview.png")

    save_snapshot(session, path)

    assert load_snapshot_payload(path) == document_to_dict(session.document)
    restored = load_snapshot_document(path)
    assert document_to_dict(restored) == document_to_dict(session.document)
    assert restored.has_spawn(0, 1)


def test_plain_png_has_no_map(tmp_path):
    path = str(tmp_path / "plain.png")
    Image.new("RGB", (10, 10), "red").save(path)
    with pytest.raises(MapImportError, match="hex_map_document"):
        load_snapshot_payload(path)
    with pytest.raises(MapImportError):
        load_snapshot_document(path)


def test_asset_manager_scales_and_caches(tmp_path):
    Image.new("RGBA", (10, 20), "blue").save(tmp_path / "tree.png")
    am = AssetManager(str(tmp_path))

    img = am.get_image("tree.png", 40)
    assert img.size == (40, 80)
    assert am.get_image("tree.png", 40) is img
    assert am.list_assets() == ["tree.png"]


def test_asset_manager_missing_and_broken(tmp_path, capsys):
    (tmp_path / "broken.png").write_text("not an image")
    am = AssetManager(str(tmp_path))

    assert am.get_image("", 40) is None
    assert am.get_image("nope.png", 40) is None
    assert am.get_image("broken.png", 40) is None
    assert "Error loading asset broken.png" in capsys.readouterr().out
    assert am.get_image("broken.png", 40) is None
    assert capsys.readouterr().out == ""

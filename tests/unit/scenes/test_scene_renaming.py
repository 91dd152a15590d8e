from __future__ import annotations

import json
from pathlib import Path

import pytest

from map_cleaner.errors import SceneMapError
from map_cleaner.scenes import load_scene_name_map, plan_scene_renames, rename_scenes

MAPS = {
    "factory": {
        "factory_day": "maps/factory/Factory_Day.unity",
        "factory_night": "maps/factory/Factory_Night.unity",
    },
    "woods": {"woods_main": "Woods.unity"},
}


def _write_maps(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_scene_name_map_uses_last_path_segment(tmp_path: Path) -> None:
    maps_json = _write_maps(tmp_path / "maps.json", MAPS)

    assert load_scene_name_map(maps_json) == {
        "factory_day.unity": "Factory_Day.unity",
        "factory_night.unity": "Factory_Night.unity",
        "woods_main.unity": "Woods.unity",
    }


def test_load_scene_name_map_rejects_malformed_json(tmp_path: Path) -> None:
    maps_json = tmp_path / "maps.json"
    maps_json.write_text("{not json", encoding="utf-8")

    with pytest.raises(SceneMapError, match="invalid JSON"):
        load_scene_name_map(maps_json)


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        (["factory"], "top-level value must be an object"),
        ({"factory": "Factory.unity"}, "entry 'factory' must be an object"),
        ({"factory": {"day": 3}}, "value 'factory.day' must be a string"),
    ],
)
def test_load_scene_name_map_rejects_wrong_shapes(
    tmp_path: Path, payload: object, message: str
) -> None:
    maps_json = _write_maps(tmp_path / "maps.json", payload)

    with pytest.raises(SceneMapError, match=message):
        load_scene_name_map(maps_json)


def test_load_scene_name_map_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(SceneMapError):
        load_scene_name_map(tmp_path / "missing.json")


def test_rename_scenes_moves_scene_and_sidecar(tmp_path: Path) -> None:
    scenes = tmp_path / "Scenes"
    scenes.mkdir()
    (scenes / "factory_day.unity").write_text("scene", encoding="utf-8")
    (scenes / "factory_day.unity.meta").write_text("guid: aa\n", encoding="utf-8")
    (scenes / "other.unity").write_text("scene", encoding="utf-8")

    renamed = rename_scenes(scenes, {"factory_day.unity": "Factory_Day.unity"})

    assert [(item.source.name, item.target.name) for item in renamed] == [
        ("factory_day.unity", "Factory_Day.unity"),
        ("factory_day.unity.meta", "Factory_Day.unity.meta"),
    ]
    assert sorted(path.name for path in scenes.iterdir()) == [
        "Factory_Day.unity",
        "Factory_Day.unity.meta",
        "other.unity",
    ]


def test_rename_scenes_dry_run_only_plans(tmp_path: Path) -> None:
    scenes = tmp_path / "Scenes"
    scenes.mkdir()
    scene = scenes / "woods_main.unity"
    scene.write_text("scene", encoding="utf-8")

    renamed = rename_scenes(scenes, {"woods_main.unity": "Woods.unity"}, dry_run=True)

    assert [item.target.name for item in renamed] == ["Woods.unity"]
    assert scene.exists()
    assert not (scenes / "Woods.unity").exists()


def test_rename_scenes_refuses_to_overwrite(tmp_path: Path) -> None:
    scenes = tmp_path / "Scenes"
    scenes.mkdir()
    (scenes / "woods_main.unity").write_text("new", encoding="utf-8")
    (scenes / "Woods.unity").write_text("old", encoding="utf-8")

    with pytest.raises(SceneMapError, match="target already exists"):
        rename_scenes(scenes, {"woods_main.unity": "Woods.unity"})

    assert (scenes / "woods_main.unity").read_text(encoding="utf-8") == "new"


def test_plan_ignores_missing_folder_and_empty_map(tmp_path: Path) -> None:
    assert plan_scene_renames(tmp_path / "missing", {"a.unity": "b.unity"}) == []
    assert plan_scene_renames(tmp_path, {}) == []


def test_rename_scenes_refuses_two_scenes_with_one_target(tmp_path: Path) -> None:
    scenes = tmp_path / "Scenes"
    scenes.mkdir()
    (scenes / "a.unity").write_text("A", encoding="utf-8")
    (scenes / "b.unity").write_text("B", encoding="utf-8")

    with pytest.raises(SceneMapError, match="renamed to the same name"):
        rename_scenes(scenes, {"a.unity": "Same.unity", "b.unity": "Same.unity"})

    assert sorted(path.name for path in scenes.iterdir()) == ["a.unity", "b.unity"]
    assert (scenes / "a.unity").read_text(encoding="utf-8") == "A"

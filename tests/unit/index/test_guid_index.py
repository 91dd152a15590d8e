from __future__ import annotations

import io
from pathlib import Path

import pytest

from map_cleaner.errors import MetaDecodeError
from map_cleaner.index import GuidIndex, build_guid_index
from map_cleaner.logging import ProgressReporter


def _asset(root: Path, relative: str, guid: str, text: str = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    (root / f"{relative}.meta").write_text(
        f"fileFormatVersion: 2\nguid: {guid}\n", encoding="utf-8"
    )
    return path


def test_index_maps_guid_to_content_path_without_suffix(tmp_path: Path) -> None:
    crate = _asset(tmp_path, "Models/crate.prefab", "0a1b2c3d")
    texture = _asset(tmp_path, "Textures/Deep/wood.png", "ffee0011")

    index = build_guid_index(tmp_path)

    assert index.lookup("0a1b2c3d") == crate
    assert index.lookup("ffee0011") == texture
    assert len(index) == 2
    assert index.meta_file_count == 2


def test_index_lookup_of_unknown_guid_returns_none(tmp_path: Path) -> None:
    _asset(tmp_path, "a.mat", "aa")

    index = build_guid_index(tmp_path)

    assert index.lookup("0000000000000000f000000000000000") is None
    assert "0000000000000000f000000000000000" not in index


def test_index_duplicate_guid_is_last_write_wins_in_sorted_order(tmp_path: Path) -> None:
    _asset(tmp_path, "a/first.mat", "dd")
    second = _asset(tmp_path, "b/second.mat", "dd")

    index = build_guid_index(tmp_path)

    assert index.lookup("dd") == second
    assert index.duplicates == ("dd",)
    assert index.meta_file_count == 2


def test_index_decode_failure_is_fatal_by_default(tmp_path: Path) -> None:
    _asset(tmp_path, "ok.mat", "aa")
    broken = tmp_path / "broken.mat.meta"
    broken.write_text("fileFormatVersion: 2\n", encoding="utf-8")

    with pytest.raises(MetaDecodeError) as excinfo:
        build_guid_index(tmp_path)

    assert excinfo.value.path == broken


def test_index_skip_mode_records_and_omits_broken_sidecars(tmp_path: Path) -> None:
    ok = _asset(tmp_path, "ok.mat", "aa")
    (tmp_path / "broken.mat.meta").write_text("guid: [\n", encoding="utf-8")
    stream = io.StringIO()

    index = build_guid_index(
        tmp_path, skip_decode_errors=True, progress=ProgressReporter(stream=stream)
    )

    assert dict(index) == {"aa": ok}
    assert len(index.skipped) == 1
    assert index.skipped[0].path == tmp_path / "broken.mat.meta"
    assert index.meta_file_count == 2
    assert "Skipping unreadable metadata" in stream.getvalue()


def test_parallel_build_matches_sequential_build(tmp_path: Path) -> None:
    for number in range(40):
        _asset(tmp_path, f"dir{number % 5}/asset{number:02d}.mat", f"{number:08x}")
    _asset(tmp_path, "z/duplicate.mat", f"{7:08x}")

    sequential = build_guid_index(tmp_path, workers=1)
    parallel = build_guid_index(tmp_path, workers=8)

    assert dict(parallel) == dict(sequential)
    assert parallel.duplicates == sequential.duplicates == (f"{7:08x}",)


def test_index_reports_progress(tmp_path: Path) -> None:
    _asset(tmp_path, "a.mat", "aa")
    _asset(tmp_path, "b.mat", "bb")
    stream = io.StringIO()

    build_guid_index(tmp_path, progress=ProgressReporter(stream=stream))

    output = stream.getvalue()
    assert "Processing 2 meta files..." in output
    assert output.rstrip().endswith("Done processing meta files")


def test_index_honors_custom_sidecar_suffix(tmp_path: Path) -> None:
    asset = tmp_path / "thing.bin"
    asset.write_bytes(b"\x00")
    (tmp_path / "thing.bin.sidecar").write_text("guid: abc\n", encoding="utf-8")
    (tmp_path / "other.bin.meta").write_text("guid: def\n", encoding="utf-8")

    index = build_guid_index(tmp_path, meta_suffix=".sidecar")

    assert dict(index) == {"abc": asset}


def test_from_pairs_builds_mapping_in_order() -> None:
    index = GuidIndex.from_pairs([("aa", Path("x")), ("bb", Path("y")), ("aa", Path("z"))])

    assert index.lookup("aa") == Path("z")
    assert index["bb"] == Path("y")
    assert sorted(index) == ["aa", "bb"]
    assert index.duplicates == ("aa",)


@pytest.mark.parametrize("workers", [1, 4])
def test_index_ticks_progress_for_any_worker_count(tmp_path: Path, workers: int) -> None:
    _asset(tmp_path, "a.mat", "aa")
    _asset(tmp_path, "b.mat", "bb")
    stream = io.StringIO()

    build_guid_index(tmp_path, workers=workers, progress=ProgressReporter(stream=stream))

    assert stream.getvalue() == (
        "Processing 2 meta files...\n0..\nDone processing meta files\n"
    )


def test_index_keeps_uppercase_guid_without_aborting(tmp_path: Path) -> None:
    shouty = _asset(tmp_path, "shouty.mat", "ABCDEF01")
    quiet = _asset(tmp_path, "quiet.mat", "abcdef02")

    index = build_guid_index(tmp_path)

    assert index.lookup("ABCDEF01") == shouty
    assert index.lookup("abcdef01") is None
    assert index.lookup("abcdef02") == quiet

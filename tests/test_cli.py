import json

from dungeon_tilesets.cli import EXIT_CONFIG_ERROR, EXIT_GENERATION_FAILED, EXIT_OK, main
from dungeon_tilesets.generators.tiles.tile_storage import save_tile_record

from conftest import make_dead_end_tile, make_open_tile


def _theme(tmp_path, *tiles):
    theme_dir = tmp_path / "themes" / "crypt"
    for tile in tiles:
        save_tile_record(tile, theme_dir)
    return tmp_path / "themes"


def _args(root, *extra):
    return ["--theme", "crypt", "--tiles-root", str(root), "--no-image-check",
            "--seed", "4", *extra]


def test_cli_writes_layout(tmp_path):
    root = _theme(tmp_path, make_open_tile(size=9), make_dead_end_tile(size=9))
    out = tmp_path / "out" / "layout.json"
    assert main(_args(root, "--output", str(out))) == EXIT_OK
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["canvas"] == {"width": 5400, "height": 5400}
    assert data["tiles"]


def test_cli_scene_payload_to_stdout(tmp_path, capsys):
    root = _theme(tmp_path, make_dead_end_tile(size=9))
    assert main(_args(root, "--scene", "--size", "medium")) == EXIT_OK
    scene = json.loads(capsys.readouterr().out)
    assert scene["width"] == 5 * 9 * 200
    assert all(tile["locked"] for tile in scene["tiles"])


def test_cli_reports_budget_exhaustion(tmp_path):
    root = _theme(tmp_path, make_open_tile(size=9))
    assert main(_args(root, "--max-attempts", "5")) == EXIT_GENERATION_FAILED


def test_cli_rejects_bad_settings(tmp_path):
    root = _theme(tmp_path, make_dead_end_tile(size=9))
    assert main(_args(root, "--max-attempts", "0")) == EXIT_CONFIG_ERROR


def test_cli_rejects_empty_theme(tmp_path):
    assert main(["--theme", "void", "--tiles-root", str(tmp_path)]) == EXIT_CONFIG_ERROR

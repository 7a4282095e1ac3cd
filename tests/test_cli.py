import numpy as np
from PIL import Image
from typer.testing import CliRunner

from tileoverlay.client.cli import APP
from tileoverlay.settings import settings

from conftest import RED, WHITE, png_bytes, rgba

runner = CliRunner()


def write_inputs(tmp_path):
    template = tmp_path / "template.png"
    tile = tmp_path / "tile.png"
    template.write_bytes(png_bytes(rgba(2, 3, RED)))
    tile.write_bytes(png_bytes(rgba(20, 20, WHITE)))
    return template, tile


def test_analyze(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "tile_size", 20)
    template, tile = write_inputs(tmp_path)

    result = runner.invoke(APP, ["analyze", str(template), str(tile), "4", "4", "1", "2"])

    assert result.exit_code == 0, result.output
    assert "6 pixels to paint" in result.output


def test_preview(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "tile_size", 20)
    template, tile = write_inputs(tmp_path)
    output = tmp_path / "preview.png"

    result = runner.invoke(
        APP,
        ["preview", str(template), str(tile), "4", "4", "1", "2", "--output", str(output)],
    )

    assert result.exit_code == 0, result.output

    image = np.array(Image.open(output).convert("RGBA"))
    assert image.shape == (60, 60, 4)
    assert tuple(image[2 * 3 + 1, 1 * 3 + 1, :3]) == RED


def test_serve(monkeypatch):
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append(kwargs))

    result = runner.invoke(APP, ["serve", "--port", "9001"])

    assert result.exit_code == 0, result.output
    assert calls == [{"host": "127.0.0.1", "port": 9001}]

import logging
import sys

import numpy as np
import pytest
from PIL import Image

from photo_compositor.__main__ import main, parse_layer_spec, parse_size
from photo_compositor.api.layers import Adjustments
from photo_compositor.constants import BlendMode, FilterKind

from .utils import random_buffer, solid

logger = logging.getLogger(__name__)


@pytest.fixture
def inputs(tmp_path):
    paths = []
    for i, image in enumerate(
        [solid(6, 4, (200, 100, 50, 255)), random_buffer(3, 3, seed=60)]
    ):
        path = tmp_path / ("input%d.png" % i)
        Image.fromarray(image).save(path)
        paths.append(str(path))
    return paths


@pytest.mark.parametrize(
    "argv",
    [
        ["-h"],
        ["--version"],
        ["export", "-h"],
        ["export", "out.png"],
        ["unknown"],
    ],
)
def test_main_exits(argv):
    with pytest.raises(SystemExit):
        main(argv)
        sys.exit()


def test_main_export(inputs, tmp_path):
    output = str(tmp_path / "output.png")
    argv = [
        "-v",
        "export",
        output,
        "-i",
        inputs[0],
        "-i",
        inputs[1] + "[blend_mode=multiply,filter=invert,opacity=50,x=0,scale=2]",
    ]
    assert main(argv) is None
    with Image.open(output) as image:
        assert image.mode == "RGBA"
        assert image.size == (6, 4)


def test_main_export_single_layer_round_trip(inputs, tmp_path):
    output = str(tmp_path / "output.png")
    assert main(["export", output, "-i", inputs[0]]) is None
    with Image.open(output) as image:
        assert np.all(np.asarray(image) == (200, 100, 50, 255))


def test_main_export_max_size(inputs, tmp_path):
    output = str(tmp_path / "output.png")
    assert main(["export", output, "-i", inputs[0], "--max-size", "3x3"]) is None
    with Image.open(output) as image:
        assert image.size == (3, 2)


def test_main_export_hidden_layer(inputs, tmp_path):
    output = str(tmp_path / "output.png")
    argv = ["export", output, "-i", inputs[0], "-i", inputs[1] + "[hidden]"]
    assert main(argv) is None
    with Image.open(output) as image:
        assert np.all(np.asarray(image) == (200, 100, 50, 255))


@pytest.mark.parametrize(
    "option",
    ["[blend_mode=dissolve]", "[filter=emboss]", "[opacity=abc]", "[unknown=1]"],
)
def test_main_export_bad_option(inputs, tmp_path, option):
    output = str(tmp_path / "output.png")
    with pytest.raises(SystemExit):
        main(["export", output, "-i", inputs[0] + option])


def test_main_export_out_of_range(inputs, tmp_path):
    output = str(tmp_path / "output.png")
    assert main(["export", output, "-i", inputs[0] + "[opacity=150]"]) == 1


def test_main_export_missing_file(tmp_path):
    output = str(tmp_path / "output.png")
    assert main(["export", output, "-i", str(tmp_path / "missing.png")]) == 1


def test_main_info(inputs, capsys):
    assert main(["info"] + inputs) is None
    out = capsys.readouterr().out
    assert "input0.png: 6x4" in out
    assert "input1.png: 3x3" in out


def test_main_info_missing_file(tmp_path):
    assert main(["info", str(tmp_path / "missing.png")]) == 1


def test_parse_layer_spec():
    path, kwargs = parse_layer_spec(
        "a[b].png[name=top,blend_mode=screen,filter=sepia,brightness=10,hue=-20,"
        "y=5,hidden]"
    )
    assert path == "a[b].png"
    assert kwargs == dict(
        name="top",
        blend_mode=BlendMode.SCREEN,
        filter=FilterKind.SEPIA,
        adjustments=Adjustments(brightness=10, hue=-20),
        position=(None, 5.0),
        visible=False,
    )
    assert parse_layer_spec("plain.png") == ("plain.png", {})


def test_parse_size():
    assert parse_size("640x480") == (640, 480)
    assert parse_size("10X20") == (10, 20)

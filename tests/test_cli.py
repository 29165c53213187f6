import base64

import pytest

from imagelab.api import cli

from conftest import RESULT_PNG_B64, instruction_of, text_response


def _input_file(tmp_path, png_bytes):
    path = tmp_path / "photo.png"
    path.write_bytes(png_bytes)
    return path


def test_remove_background_writes_default_output(tmp_path, png_bytes, installed_model, capsys):
    source = _input_file(tmp_path, png_bytes)

    code = cli.main(["remove-background", str(source), "--intensity", "subtle"])

    output = tmp_path / "processed_remove-background.png"
    assert code == 0
    assert output.read_bytes() == base64.b64decode(RESULT_PNG_B64)
    assert str(output) in capsys.readouterr().out
    assert "soft edges" in instruction_of(installed_model.calls[0])


def test_upscale_to_explicit_output(tmp_path, png_bytes, installed_model):
    source = _input_file(tmp_path, png_bytes)
    target = tmp_path / "big.png"

    code = cli.main(["upscale", str(source), "--scale", "4x", "-o", str(target)])

    assert code == 0
    assert target.exists()
    assert instruction_of(installed_model.calls[0]) == "Upscale this image by 4x"


def test_compress_keeps_integer_target(tmp_path, png_bytes, installed_model):
    source = _input_file(tmp_path, png_bytes)

    cli.main(["compress", str(source), "--target-size-mb", "4"])

    assert "under 4MB" in instruction_of(installed_model.calls[0])


def test_non_positive_target_exits_1(tmp_path, png_bytes, installed_model, capsys):
    source = _input_file(tmp_path, png_bytes)

    code = cli.main(["compress", str(source), "--target-size-mb", "0"])

    assert code == 1
    assert "target_size_mb" in capsys.readouterr().err
    assert installed_model.calls == []


def test_empty_response_exits_1(tmp_path, png_bytes, installed_model, capsys):
    installed_model.response = text_response()
    source = _input_file(tmp_path, png_bytes)

    code = cli.main(["upscale", str(source)])

    assert code == 1
    assert "No media returned" in capsys.readouterr().err


def test_bad_choice_is_usage_error(tmp_path, png_bytes):
    source = _input_file(tmp_path, png_bytes)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["upscale", str(source), "--scale", "3x"])

    assert excinfo.value.code == 2


def test_unwritable_output_exits_1(tmp_path, png_bytes, installed_model, capsys):
    source = _input_file(tmp_path, png_bytes)
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("occupied")

    code = cli.main(["upscale", str(source), "-o", str(blocker / "out.png")])

    assert code == 1
    assert capsys.readouterr().err.startswith("imagelab: ")

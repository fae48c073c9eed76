import json

import pytest

import main
from svgsmith.models import ColorThresholdRemover


@pytest.fixture
def traced_with_boxes(monkeypatch, box_vectorizer):
    real = main.process_image

    def process_image(*args, **kwargs):
        return real(*args, vectorizer=box_vectorizer, remover=ColorThresholdRemover(), **kwargs)

    monkeypatch.setattr(main, "process_image", process_image)


def test_writes_svg_component_and_metadata(tmp_path, to_png, bordered_red, traced_with_boxes, capsys):
    source = tmp_path / "acme-logo.png"
    source.write_bytes(to_png(bordered_red))
    out = tmp_path / "out"

    main.main([str(source), "-o", str(out), "--mode", "logo", "--remove-background", "--preview", "black"])

    assert (out / "AcmeLogo.svg").read_text().startswith("<svg")
    assert "export default function AcmeLogo" in (out / "AcmeLogo.tsx").read_text()
    assert (out / "AcmeLogo.black.svg").exists()
    metadata = json.loads((out / "AcmeLogo.json").read_text())
    assert metadata["mode"] == "logo"
    assert metadata["backgroundColor"] == "#FFFFFF"
    assert "svg" not in metadata
    assert "Done! Generated 4 files." in capsys.readouterr().out


def test_custom_name(tmp_path, to_png, black_square_on_white, traced_with_boxes):
    source = tmp_path / "square.png"
    source.write_bytes(to_png(black_square_on_white))

    main.main([str(source), "-o", str(tmp_path), "--name", "check box"])

    assert (tmp_path / "Checkbox.svg").exists()


def test_missing_input(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main.main([str(tmp_path / "nope.png")])

    assert excinfo.value.code == 1
    assert "Input file not found" in capsys.readouterr().err


def test_pipeline_error_exits(tmp_path, capsys):
    source = tmp_path / "notes.png"
    source.write_text("not an image")

    with pytest.raises(SystemExit) as excinfo:
        main.main([str(source), "-o", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "Error:" in capsys.readouterr().err


def test_replace_color(tmp_path, to_png, bordered_red, traced_with_boxes):
    source = tmp_path / "brand.png"
    source.write_bytes(to_png(bordered_red))

    main.main([
        str(source), "-o", str(tmp_path), "--mode", "logo", "--remove-background",
        "--replace-color", "#f00=#0044FF",
    ])

    svg = (tmp_path / "Brand.svg").read_text()
    assert "#0044FF" in svg
    assert "#0044FF" in (tmp_path / "Brand.tsx").read_text()


def test_replace_color_requires_pair(tmp_path, to_png, bordered_red):
    source = tmp_path / "brand.png"
    source.write_bytes(to_png(bordered_red))

    with pytest.raises(SystemExit) as excinfo:
        main.main([str(source), "--replace-color", "#f00"])

    assert excinfo.value.code == 2

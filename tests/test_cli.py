import json
import sys

from PIL import Image

from conftest import solid_rgba
from make_stencil import list_input_images, main, output_path_for


def _write_png(path, rgb=(128, 128, 128), size=(40, 30)):
    Image.fromarray(solid_rgba(size[1], size[0], rgb)).save(path)
    return path


def test_output_naming(tmp_path):
    src = tmp_path / "cat.jpg"
    assert output_path_for(src, None, "png") == tmp_path / "cat_stencil.png"
    assert output_path_for(src, tmp_path / "out", "pdf") == tmp_path / "out" / "cat_stencil.pdf"


def test_single_file_png(tmp_path, capsys):
    src = _write_png(tmp_path / "dog.png")
    outdir = tmp_path / "out"
    assert main([str(src), "--outdir", str(outdir), "--mode", "solid"]) == 0
    out = outdir / "dog_stencil.png"
    with Image.open(out) as im:
        assert im.size == (2480, 3508)
    assert "dog_stencil.png" in capsys.readouterr().out


def test_pdf_and_manifest(tmp_path):
    src = _write_png(tmp_path / "fox.png")
    assert main([str(src), "--format", "pdf", "--manifest", "--multi", "--variants", "6"]) == 0
    pdf = tmp_path / "fox_stencil.pdf"
    assert pdf.read_bytes().startswith(b"%PDF")
    manifest = json.loads((tmp_path / "fox_stencil.json").read_text(encoding="utf-8"))
    assert manifest["grid"] == {"cols": 2, "rows": 3}
    assert len(manifest["placed"]) == 6
    assert manifest["image_file"] == str(pdf)


def test_folder_skips_previous_outputs(tmp_path):
    _write_png(tmp_path / "a.png")
    _write_png(tmp_path / "b.png", rgb=(10, 200, 30))
    _write_png(tmp_path / "a_stencil.png")
    (tmp_path / "notes.txt").write_text("hi", encoding="utf-8")

    assert [p.name for p in list_input_images(tmp_path)] == ["a.png", "b.png"]
    assert main([str(tmp_path), "--jobs", "2", "--preset", "bold"]) == 0
    assert (tmp_path / "b_stencil.png").exists()
    assert not (tmp_path / "a_stencil_stencil.png").exists()


def test_failed_file_sets_exit_status(tmp_path, capsys):
    bad = tmp_path / "broken.png"
    bad.write_bytes(b"not really a png")
    assert main([str(bad)]) == 1
    assert "broken.png" in capsys.readouterr().out


def test_missing_input(tmp_path):
    assert main([str(tmp_path / "nope.png")]) == 2


def test_bad_settings(tmp_path):
    src = _write_png(tmp_path / "owl.png")
    assert main([str(src), "--threshold", "999"]) == 2
    assert not (tmp_path / "owl_stencil.png").exists()


def test_parallel_folder_logs_every_file(tmp_path, capsys):
    for i in range(6):
        _write_png(tmp_path / f"img{i}.png", rgb=(20 * i, 90, 140))
    real_stdout = sys.stdout
    assert main([str(tmp_path), "--jobs", "4"]) == 0
    assert sys.stdout is real_stdout
    out = capsys.readouterr().out
    positions = [out.index(f"Wrote img{i}_stencil.png") for i in range(6)]
    assert positions == sorted(positions)


def test_unwritable_outdir_is_reported_per_file(tmp_path, capsys):
    _write_png(tmp_path / "a.png")
    _write_png(tmp_path / "b.png")
    blocker = tmp_path / "blocker"
    blocker.write_text("not a folder", encoding="utf-8")
    assert main([str(tmp_path), "--outdir", str(blocker / "out"), "--jobs", "2"]) == 1
    err = capsys.readouterr().err
    assert "a.png: cannot write output" in err
    assert "b.png: cannot write output" in err


def test_mistyped_settings_file(tmp_path, capsys):
    src = _write_png(tmp_path / "elk.png")
    settings_file = tmp_path / "s.json"
    settings_file.write_text(json.dumps({"threshold": "200"}), encoding="utf-8")
    assert main([str(src), "--settings", str(settings_file)]) == 2
    assert "threshold must be a number" in capsys.readouterr().err

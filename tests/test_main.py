"""Tests for the command-line interface."""

import argparse

import numpy as np
import pytest
import zstandard as zstd
from termcolor import termcolor as termcolor_impl

from config import VERSION
from console import OutputExistsError, run_encode
from main import main


def encode_args(bmp_dir, output, force=False, level=22, threads=0):
    return argparse.Namespace(
        bmp_dir=bmp_dir, output=output, force=force, zstd_level=level, zstd_threads=threads
    )


def test_encode_writes_volume(valid_stack, tmp_path, capsys):
    output = tmp_path / "volume.raw.zst"

    status = main(["encode", str(valid_stack), "-o", str(output), "-l", "22"])

    assert status == 0
    assert output.is_file()
    out = capsys.readouterr().out
    assert "Found 2 BMP file(s)" in out
    assert f'Finished writing 2×2×2 voxels to "{output}"' in out


def test_existing_output_refused_without_force(valid_stack, tmp_path, capsys):
    output = tmp_path / "volume.raw.zst"
    output.write_bytes(b"keep me")

    status = main(["encode", str(valid_stack), "--output", str(output)])

    assert status == 1
    assert output.read_bytes() == b"keep me"
    assert "already exists, run with `--force` to overwrite" in capsys.readouterr().err


def test_existing_output_overwritten_with_force(valid_stack, tmp_path):
    output = tmp_path / "volume.raw.zst"
    output.write_bytes(b"replace me")

    status = main(["encode", str(valid_stack), "-o", str(output), "--force"])

    assert status == 0
    data = output.read_bytes()
    assert data != b"replace me"
    header_len = 8 + int.from_bytes(data[4:8], "little")
    assert zstd.ZstdDecompressor().decompress(data[header_len:]) == bytes([1, 3, 2, 4, 5, 7, 6, 8])


def test_run_encode_raises_for_existing_output(valid_stack, tmp_path):
    output = tmp_path / "volume.raw.zst"
    output.touch()

    with pytest.raises(OutputExistsError):
        run_encode(encode_args(valid_stack, output))


def test_empty_directory_exits_cleanly(tmp_path, capsys):
    empty = tmp_path / "empty"
    empty.mkdir()
    output = tmp_path / "volume.raw.zst"

    status = main(["encode", str(empty), "-o", str(output)])

    assert status == 0
    assert not output.exists()
    assert f'No BMP files found in "{empty}"' in capsys.readouterr().out


def test_mismatched_stack_fails(make_stack, tmp_path, capsys):
    directory = make_stack({"1.bmp": [[0, 0], [0, 0]], "2.bmp": [[0, 0, 0]]})
    output = tmp_path / "volume.raw.zst"

    status = main(["encode", str(directory), "-o", str(output)])

    assert status == 1
    assert not output.exists()
    assert "different dimensions" in capsys.readouterr().err


def test_invalid_bmp_fails(valid_stack, tmp_path, capsys):
    (valid_stack / "0.bmp").write_bytes(b"garbage")

    status = main(["encode", str(valid_stack), "-o", str(tmp_path / "volume.raw.zst")])

    assert status == 1
    assert "0.bmp" in capsys.readouterr().err


@pytest.mark.parametrize("option", [["-l", "0"], ["-l", "23"], ["-l", "fast"], ["-t", "-1"]])
def test_invalid_compression_options(valid_stack, tmp_path, option):
    with pytest.raises(SystemExit) as excinfo:
        main(["encode", str(valid_stack), "-o", str(tmp_path / "v.zst"), *option])
    assert excinfo.value.code == 2


def test_missing_directory_rejected(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["encode", str(tmp_path / "missing"), "-o", str(tmp_path / "v.zst")])
    assert excinfo.value.code == 2


def test_file_instead_of_directory_rejected(tmp_path):
    not_a_dir = tmp_path / "file.bmp"
    not_a_dir.write_bytes(b"")
    with pytest.raises(SystemExit) as excinfo:
        main(["encode", str(not_a_dir), "-o", str(tmp_path / "v.zst")])
    assert excinfo.value.code == 2


def test_output_is_required(valid_stack):
    with pytest.raises(SystemExit) as excinfo:
        main(["encode", str(valid_stack)])
    assert excinfo.value.code == 2


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == f"stack2vol {VERSION}"


@pytest.fixture
def color_env(monkeypatch):
    """Clean colour environment; termcolor may cache its terminal check."""
    for name in ("NO_COLOR", "FORCE_COLOR", "ANSI_COLORS_DISABLED"):
        monkeypatch.delenv(name, raising=False)
    cache_clear = getattr(termcolor_impl._can_do_colour, "cache_clear", None)
    if cache_clear is not None:
        cache_clear()
    yield monkeypatch
    if cache_clear is not None:
        cache_clear()


def test_error_is_red_when_color_forced(valid_stack, tmp_path, capsys, color_env):
    color_env.setenv("FORCE_COLOR", "1")
    output = tmp_path / "volume.raw.zst"
    output.touch()

    status = main(["encode", str(valid_stack), "-o", str(output)])

    assert status == 1
    err = capsys.readouterr().err
    assert err.startswith("\x1b[31mOutput ")
    assert err.rstrip("\n").endswith("\x1b[0m")


def test_error_is_plain_with_no_color(valid_stack, tmp_path, capsys, color_env):
    color_env.setenv("NO_COLOR", "1")
    output = tmp_path / "volume.raw.zst"
    output.touch()

    status = main(["encode", str(valid_stack), "-o", str(output)])

    assert status == 1
    err = capsys.readouterr().err
    assert "\x1b[" not in err
    assert err.startswith(f'Output "{output}" already exists')


def test_corrupt_slice_keeps_existing_output(make_stack, tmp_path):
    pixels = (np.arange(64 * 64) % 256).astype(np.uint8).reshape(64, 64)
    directory = make_stack({"1.bmp": pixels, "2.bmp": pixels})
    second = directory / "2.bmp"
    second.write_bytes(second.read_bytes()[:second.stat().st_size // 2])
    output = tmp_path / "volume.raw.zst"
    output.write_bytes(b"precious")

    status = main(["encode", str(directory), "-o", str(output), "--force"])

    assert status == 1
    assert output.read_bytes() == b"precious"

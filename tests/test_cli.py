from __future__ import annotations

from pathlib import Path

import pytest
from PyPDF2 import PdfReader

from merge_files import main


def test_cli_merges_folder(sample_folder: Path, tmp_path: Path, capsys) -> None:
    output = tmp_path / "merged.pdf"

    assert main([str(sample_folder), "-o", str(output)]) == 0

    assert len(PdfReader(str(output)).pages) == 4
    out = capsys.readouterr().out
    assert "Summary: merged=3, failed=0, pages=4 (total=3)" in out


def test_cli_succeeds_with_failed_candidates(sample_folder: Path, tmp_path: Path, capsys) -> None:
    (sample_folder / "corrupt.pdf").write_bytes(b"garbage")
    output = tmp_path / "merged.pdf"

    assert main([str(sample_folder), "-o", str(output)]) == 0

    captured = capsys.readouterr()
    assert "failed=1" in captured.out
    assert "Skipped 'corrupt.pdf'" in captured.err


def test_cli_missing_folder(tmp_path: Path, capsys) -> None:
    assert main([str(tmp_path / "missing"), "-o", str(tmp_path / "out.pdf")]) == 1

    assert "does not exist" in capsys.readouterr().err
    assert not (tmp_path / "out.pdf").exists()


def test_cli_empty_folder_is_not_an_error(tmp_path: Path, capsys) -> None:
    folder = tmp_path / "files"
    folder.mkdir()

    assert main([str(folder), "-o", str(tmp_path / "out.pdf")]) == 0

    assert "No PDF or image files found" in capsys.readouterr().out
    assert not (tmp_path / "out.pdf").exists()


def test_cli_output_write_failure(sample_folder: Path, tmp_path: Path) -> None:
    output = tmp_path / "taken"
    output.mkdir()

    assert main([str(sample_folder), "-o", str(output)]) == 1


def test_cli_defaults_to_files_folder(sample_folder: Path, monkeypatch) -> None:
    monkeypatch.chdir(sample_folder.parent)

    assert main([]) == 0

    assert (sample_folder.parent / "merged_output.pdf").exists()


@pytest.mark.parametrize("margin", ["300", "-1"])
def test_cli_rejects_margin_without_room(sample_folder: Path, tmp_path: Path, margin: str) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([str(sample_folder), "-o", str(tmp_path / "out.pdf"), "--margin", margin])

    assert excinfo.value.code == 2
    assert not (tmp_path / "out.pdf").exists()

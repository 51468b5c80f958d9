"""Unit tests for the generation pipeline."""

import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from mavir.core.generate import extract_files, run_generate
from mavir.errors import FileProcessingError, InvalidOutputPathError


def test_extract_files_keeps_input_order(java_fixtures_dir: Path) -> None:
    names = ["Point.java", "Plain.java", "AllTypes.java", "Person.java"]
    paths = [str(java_fixtures_dir / name) for name in names]

    sequential = extract_files(paths)
    parallel = extract_files(paths, jobs=4)

    assert [u.source_path for u in parallel] == paths
    assert parallel == sequential


def test_run_generate_reports_generated_classes(java_fixtures_dir: Path, tmp_path: Path) -> None:
    output = tmp_path / "out.srcjar"
    result = run_generate(
        [str(java_fixtures_dir / "Point.java"), str(java_fixtures_dir / "OuterWithNested.java")], str(output)
    )

    assert result.output_path == output
    assert result.class_names == [
        "com.github.example.AutoValue_Point",
        "com.github.example.AutoValue_OuterWithNested_Entry",
        "com.github.example.AutoValue_OuterWithNested_Middle_Leaf",
    ]
    assert output.exists()


def test_run_generate_requires_paths(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="At least one"):
        run_generate([], str(tmp_path / "out.jar"))


def test_run_generate_validates_output_before_extracting(tmp_path: Path) -> None:
    with pytest.raises(InvalidOutputPathError):
        run_generate([str(tmp_path / "Missing.java")], str(tmp_path / "out.zip"))


def test_run_generate_writes_nothing_when_a_file_fails(
    java_fixtures_dir: Path, tmp_path: Path, write_java: Callable[[str, str], Path]
) -> None:
    broken = write_java("Broken.java", "@AutoValue abstract class Broken { abstract int x(); }\n")
    output = tmp_path / "out.jar"

    with pytest.raises(FileProcessingError) as excinfo:
        run_generate([str(java_fixtures_dir / "Point.java"), str(broken)], str(output), jobs=2)

    assert excinfo.value.path == str(broken)
    assert not output.exists()


def test_run_generate_archive_lists_every_class(java_fixtures_dir: Path, tmp_path: Path) -> None:
    output = tmp_path / "out.jar"
    run_generate([str(java_fixtures_dir / "AllTypes.java"), str(java_fixtures_dir / "Person.java")], str(output))

    with zipfile.ZipFile(output) as archive:
        sources = sorted(n for n in archive.namelist() if n.endswith(".java"))
    assert sources == [
        "com/github/example/AutoValue_AllTypes.java",
        "com/github/example/AutoValue_Person.java",
    ]

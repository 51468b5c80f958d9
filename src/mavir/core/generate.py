import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from mavir.core.extract import extract_file
from mavir.core.package import package_sources, validate_output_path
from mavir.models import CompilationUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    output_path: Path
    class_names: list[str] = field(default_factory=list)


def extract_files(paths: Sequence[str], jobs: int = 1) -> list[CompilationUnit]:
    """Extract every file, in input order. The first failing file aborts the run."""
    if jobs <= 1 or len(paths) <= 1:
        return [extract_file(path) for path in paths]
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        return list(executor.map(extract_file, paths))


def run_generate(paths: Sequence[str], output_path: str, jobs: int = 1) -> GenerationResult:
    """Generate value classes for *paths* and package them into *output_path*.

    Returns the absolute archive path and the fully qualified names of the generated classes.
    """
    if not paths:
        raise ValueError("At least one source file path is required.")
    destination = validate_output_path(output_path)
    logger.debug("Writing to output path: %s", destination)

    units = extract_files(paths, jobs=jobs)
    package_sources(units, str(destination))

    class_names = [f"{unit.package_name}.{entry.synthesized_name}" for unit in units for entry in unit.classes]
    logger.info("Generated %d class(es) into %s", len(class_names), destination)
    return GenerationResult(output_path=destination, class_names=class_names)

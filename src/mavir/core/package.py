import logging
import tempfile
import zipfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path, PurePosixPath

from mavir.core.synthesize import synthesize
from mavir.errors import ArchiveError, DuplicateClassError, InvalidOutputPathError, StagingIOError
from mavir.models import ClassEntry, CompilationUnit

logger = logging.getLogger(__name__)

ACCEPTED_EXTENSIONS = (".jar", ".srcjar")
SOURCE_EXTENSION = ".java"

MANIFEST_PATH = PurePosixPath("META-INF/MANIFEST.MF")
MANIFEST_CONTENT = "Manifest-Version: 1.0\nCreated-By: mavir\n"

# Every archive entry carries this date so repeated runs produce identical bytes.
FIXED_TIMESTAMP = (2010, 1, 1, 0, 0, 0)

_DIRECTORY_MODE = 0o40755
_FILE_MODE = 0o100644
_MSDOS_DIRECTORY_FLAG = 0x10


def validate_output_path(output_path: str) -> Path:
    if not output_path.endswith(ACCEPTED_EXTENSIONS):
        raise InvalidOutputPathError(f"Output path must end in '.jar' or '.srcjar'. Got: {output_path}")

    path = Path(output_path)
    if not path.is_absolute():
        try:
            path = Path.cwd() / path
        except OSError as exc:
            raise InvalidOutputPathError(f"Failed to get current directory: {exc}") from exc

    if not path.parent.is_dir():
        raise InvalidOutputPathError(f"Parent directory of output path does not exist. Got: {path}")
    return path


def companion_source_path(package_name: str, entry: ClassEntry) -> PurePosixPath:
    return PurePosixPath(*package_name.split("."), entry.synthesized_name + SOURCE_EXTENSION)


@contextmanager
def staging_directory() -> Iterator[Path]:
    """Temporary tree that becomes the archive root; removed on every exit path."""
    try:
        temp_dir = tempfile.TemporaryDirectory(prefix="mavir")
    except OSError as exc:
        raise StagingIOError(f"Failed to create staging directory: {exc}") from exc

    with temp_dir as name:
        root = Path(name)
        manifest = root / MANIFEST_PATH
        try:
            manifest.parent.mkdir(parents=True, exist_ok=True)
            manifest.write_text(MANIFEST_CONTENT, encoding="utf-8")
        except OSError as exc:
            raise StagingIOError(f"Failed to write manifest {manifest}: {exc}") from exc
        logger.debug("Staging generated sources in %s", root)
        yield root


def _planned_sources(units: Sequence[CompilationUnit]) -> list[tuple[PurePosixPath, CompilationUnit, ClassEntry]]:
    planned: list[tuple[PurePosixPath, CompilationUnit, ClassEntry]] = []
    owners: dict[PurePosixPath, CompilationUnit] = {}
    for unit in units:
        for entry in unit.classes:
            target = companion_source_path(unit.package_name, entry)
            if target in owners:
                raise DuplicateClassError(
                    f"Generated class {unit.package_name}.{entry.synthesized_name} from "
                    f"{unit.source_path or '<source>'} collides with one from "
                    f"{owners[target].source_path or '<source>'}"
                )
            owners[target] = unit
            planned.append((target, unit, entry))
    return planned


def write_sources(staging: Path, units: Sequence[CompilationUnit]) -> list[Path]:
    """Write one source file per class; collisions are rejected before anything is written."""
    written: list[Path] = []
    for target, unit, entry in _planned_sources(units):
        path = staging.joinpath(*target.parts)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(synthesize(unit, entry), encoding="utf-8")
        except OSError as exc:
            raise StagingIOError(f"Failed to write {path}: {exc}") from exc
        logger.debug("Wrote %s", target)
        written.append(path)
    return written


def _archive_name(staging: Path, path: Path) -> str:
    name = path.relative_to(staging).as_posix()
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ArchiveError(f"Path is not representable as text: {name!r}") from exc
    return name + "/" if path.is_dir() else name


def _zip_info(name: str, is_dir: bool) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=FIXED_TIMESTAMP)
    if is_dir:
        info.external_attr = (_DIRECTORY_MODE << 16) | _MSDOS_DIRECTORY_FLAG
        info.compress_type = zipfile.ZIP_STORED
    else:
        info.external_attr = _FILE_MODE << 16
        info.compress_type = zipfile.ZIP_DEFLATED
    return info


def write_archive(staging: Path, output_path: Path) -> None:
    """Zip the staging tree into *output_path* through a single sequential writer."""
    entries = sorted(staging.rglob("*"), key=lambda p: p.relative_to(staging).as_posix())
    try:
        with zipfile.ZipFile(output_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for path in entries:
                name = _archive_name(staging, path)
                if path.is_dir():
                    archive.writestr(_zip_info(name, is_dir=True), b"")
                elif path.is_file():
                    archive.writestr(_zip_info(name, is_dir=False), path.read_bytes())
    except ArchiveError:
        output_path.unlink(missing_ok=True)
        raise
    except (OSError, zipfile.BadZipFile) as exc:
        output_path.unlink(missing_ok=True)
        raise ArchiveError(f"Failed to write archive {output_path}: {exc}") from exc
    logger.debug("Wrote %d archive entries to %s", len(entries), output_path)


def package_sources(units: Sequence[CompilationUnit], output_path: str) -> Path:
    destination = validate_output_path(output_path)
    with staging_directory() as staging:
        write_sources(staging, units)
        write_archive(staging, destination)
    return destination

"""Local property files: naming, directory safety, serialization and loading.

Files are plain ``KEY=VALUE`` lines, UTF-8, no header. Values are written
verbatim; a value holding ``=`` or a newline produces an ambiguous file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from dotenv import load_dotenv

from resources_env.config import DEFAULT_OUTPUT_DIR
from resources_env.errors import FileSystemError
from resources_env.logger import get_logger
from resources_env.models import EnvFileLocation

DIRECTORY_MODE = 0o700


class LocalFileSystem:
    """Thin filesystem seam so tests can observe or refuse writes."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def mkdir(self, path: Path, mode: int) -> None:
        path.mkdir(mode=mode, parents=True, exist_ok=True)

    def write_text(self, path: Path, content: str) -> None:
        path.write_bytes(content.encode("utf-8"))


def env_file_name(*, region: str, stage: str, function_name: str, override: Optional[str] = None) -> str:
    return override or f".{region}_{stage}_{function_name}"


def env_directory(service_path: Union[str, Path], override: Optional[str] = None) -> Path:
    return Path(service_path) / (override or DEFAULT_OUTPUT_DIR)


def build_env_file_location(
    *,
    service_path: Union[str, Path],
    region: str,
    stage: str,
    function_name: str,
    file_override: Optional[str] = None,
    directory_override: Optional[str] = None,
) -> EnvFileLocation:
    return EnvFileLocation(
        directory=env_directory(service_path, directory_override),
        file_name=env_file_name(region=region, stage=stage, function_name=function_name, override=file_override),
    )


def serialize_properties(resources: Mapping[str, str]) -> str:
    return "".join(f"{key}={value}\n" for key, value in resources.items())


def prepare_env_directory(directory: Path, fs: Optional[LocalFileSystem] = None) -> None:
    """Create ``directory`` if absent; refuse a non-directory at that path."""
    fs = fs or LocalFileSystem()
    if not fs.exists(directory):
        try:
            fs.mkdir(directory, DIRECTORY_MODE)
        except OSError as exc:
            raise FileSystemError(str(directory), f"Unable to create directory ({exc})") from exc
    if not fs.is_dir(directory):
        raise FileSystemError(str(directory), "Expected a directory")


def write_env_file(
    location: EnvFileLocation,
    resources: Mapping[str, str],
    fs: Optional[LocalFileSystem] = None,
    log: Optional[Any] = None,
) -> Path:
    """Overwrite the property file at ``location`` with ``resources``."""
    fs = fs or LocalFileSystem()
    logger = log or get_logger(__name__)
    prepare_env_directory(location.directory, fs)

    logger.info(
        "Writing %d resources to %s",
        len(resources),
        location.file_name,
        extra={"path": str(location.path), "count": len(resources)},
    )
    try:
        fs.write_text(location.path, serialize_properties(resources))
    except OSError as exc:
        raise FileSystemError(str(location.path), f"Unable to write env file ({exc})") from exc
    return location.path


def load_local_env(location: EnvFileLocation, log: Optional[Any] = None) -> bool:
    """Load ``location`` into ``os.environ`` without overriding existing keys.

    Returns False, leaving the environment untouched, when the file is absent.
    """
    logger = log or get_logger(__name__)
    path = location.path
    logger.info("Pulling in env variables from %s", path, extra={"path": str(path)})
    if not path.is_file():
        return False
    load_dotenv(path, override=False, interpolate=False)
    return True

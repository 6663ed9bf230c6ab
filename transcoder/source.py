import os
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel

from transcoder.exceptions import UnsupportedSourceLocationError


@runtime_checkable
class LocalPathResolver(Protocol):
    """Anything that can name the local file behind a media item."""

    def resolve_local_path(self) -> Path:
        ...


class LocalVolumeAsset(BaseModel):
    """A media item stored in a folder of a storage volume."""
    filename: str
    folder_path: str = ""
    volume_path: Optional[Path] = None
    is_local: bool = True

    def resolve_local_path(self) -> Path:
        if not self.is_local or self.volume_path is None:
            raise UnsupportedSourceLocationError("Paths not available for non-local asset sources")

        return self.volume_path / self.folder_path.strip("/\\") / self.filename


def resolve_source_path(source) -> Path:
    if isinstance(source, LocalPathResolver):
        return Path(source.resolve_local_path())
    if isinstance(source, (str, os.PathLike)):
        return Path(source)

    raise UnsupportedSourceLocationError(
        f"Cannot resolve a local path from {type(source).__name__}. "
        f"Pass a path or an object implementing resolve_local_path()."
    )

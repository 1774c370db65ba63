"""Value types shared by the file service and the storage providers."""
import io
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class FileApplicationType(str, Enum):
    """Application areas that store files through the file service."""
    ALL = "ALL"
    IMAGE = "IMAGE"
    STATIC = "STATIC"
    SITE_MAP = "SITE_MAP"


@dataclass(frozen=True)
class WorkArea:
    """A private, disposable directory tree used to stage files before promotion.

    Attributes:
        root_path: Absolute path of the directory owned by this work area
    """
    root_path: Path

    def contains(self, file_path: Path) -> bool:
        """Return True when ``file_path`` resolves to a descendant of the root."""
        root = self.root_path.resolve()
        candidate = Path(file_path).absolute().resolve()
        return candidate != root and root in candidate.parents

    def resource_name(self, file_path: Path) -> str:
        """Provider-relative name of a staged file (its path below the root)."""
        relative = Path(file_path).absolute().resolve().relative_to(self.root_path.resolve())
        return normalize_resource_name(relative.as_posix())


class SharedResourceStream(io.BytesIO):
    """In-memory stream for an asset bundled with the application.

    Packaged assets are shared by every tenant, so consumers can check for this
    type to store derived files (e.g. resized images) under a shared name.
    """


def normalize_resource_name(name: str) -> str:
    """Strip leading path separators so names stay provider-relative."""
    return name.lstrip("/")

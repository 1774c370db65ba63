"""
Work-area file service.

Components that create or manipulate files (generated site maps, resized
images, ...) stage them in a private temporary directory and then promote the
finished files to the configured storage provider in one batch:

1. ``initialize_work_area()`` to get a temporary directory
2. write files below ``work_area.root_path``
3. ``add_or_update_resources(work_area)`` to promote them
4. ``close_work_area(work_area)`` to delete the temporary files

Steps 1 and 4 are wrapped by the ``work_area()`` context manager.
"""
import errno
import hashlib
import importlib.resources
import logging
import random
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Sequence, Union

from storefront.adapters.storage import StorageProvider, StorageProviderFactory
from storefront.errors import InvalidOperation, StorageFailure
from storefront.file_service.work_area import (
    FileApplicationType,
    SharedResourceStream,
    WorkArea,
    normalize_resource_name,
)
from storefront.settings import Settings, get_settings
from storefront.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

DEFAULT_WORK_AREA_DIRECTORY = "storefront-work-areas"

# More random levels than this stop paying off and only slow down cleanup
MAX_GENERATED_DIRECTORY_DEPTH = 4

PathLike = Union[str, Path]


class FileService:
    """Allocates work areas and promotes their files to a storage provider."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        default_provider: Optional[StorageProvider] = None,
        providers: Optional[List[StorageProvider]] = None,
    ):
        """
        Initialize the file service

        Args:
            settings: Service configuration, read once and never modified
            default_provider: Provider used for every operation; built from
                the deployment mode when omitted
            providers: Every available provider, default included
        """
        self.settings = settings or get_settings()
        self.default_provider = default_provider or StorageProviderFactory.get_storage_provider(self.settings)
        self.providers = list(providers or [self.default_provider])
        if self.default_provider not in self.providers:
            self.providers.append(self.default_provider)

    @property
    def generated_directory_depth(self) -> int:
        """Number of random directory levels appended to every work area."""
        return min(self.settings.max_generated_directory_depth, MAX_GENERATED_DIRECTORY_DEPTH)

    def initialize_work_area(self, tenant_id: Optional[Union[str, int]] = None) -> WorkArea:
        """
        Create a work area that can be used for further operations.

        Args:
            tenant_id: Optional site/tenant identifier; each tenant's work
                areas live in their own directory

        Returns:
            A WorkArea whose root directory exists

        Raises:
            StorageFailure: If the directory could not be created
        """
        root_path = self._get_temp_directory(self._get_base_directory(tenant_id))

        if not root_path.exists():
            logger.debug("Creating temp directory named %s", root_path)
            try:
                root_path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageFailure(f"Unable to create temporary working directory for {root_path}") from e

        return WorkArea(root_path=root_path)

    @log_execution_time
    def close_work_area(self, work_area: WorkArea) -> None:
        """
        Delete the work area directory with everything in it.

        Empty generated parent directories are removed too, walking up at most
        ``generated_directory_depth - 1`` levels and stopping at the first
        parent that still holds other work areas, including one that another
        caller fills while this walk is running. Closing an already closed
        work area does nothing.

        Raises:
            StorageFailure: If the work area or an empty parent could not be
                deleted
        """
        directory = work_area.root_path
        try:
            if directory.exists():
                shutil.rmtree(directory)
        except OSError as e:
            raise StorageFailure(f"Unable to delete temporary working directory for {directory}") from e

        for _ in range(1, self.generated_directory_depth):
            directory = directory.parent
            if not directory.is_dir() or any(directory.iterdir()):
                break
            try:
                directory.rmdir()
            except OSError as e:
                # Another work area was created under this parent, or it is already gone
                if e.errno in (errno.ENOTEMPTY, errno.EEXIST, errno.ENOENT):
                    logger.debug("Stopped cleanup at %s: %s", directory, e.strerror)
                    break
                raise StorageFailure(f"Unable to delete temporary working directory for {directory}") from e

        logger.debug("Closed work area %s", work_area.root_path)

    @contextmanager
    def work_area(self, tenant_id: Optional[Union[str, int]] = None) -> Iterator[WorkArea]:
        """Yield a fresh work area and always close it afterwards."""
        area = self.initialize_work_area(tenant_id)
        try:
            yield area
        finally:
            self.close_work_area(area)

    def get_resource(
        self,
        name: str,
        application_type: Optional[FileApplicationType] = None,
    ) -> Optional[BinaryIO]:
        """Open a stored resource, or return None if it does not exist."""
        return self.select_provider(application_type).get_resource(name)

    def remove_resource(self, name: str) -> bool:
        """Remove the named resource from the storage provider."""
        return self.select_provider().remove_resource(name)

    def get_classpath_resource(self, name: str) -> Optional[SharedResourceStream]:
        """
        Load an asset bundled with an installed package.

        The ``classpath_directory`` setting names the package and an optional
        directory inside it, e.g. ``storefront/static``.

        Args:
            name: Asset path relative to the configured directory

        Returns:
            A seekable stream positioned at the start, or None if resource
            lookup is disabled, the asset is missing or it cannot be read
        """
        classpath_directory = self.settings.classpath_directory
        if not classpath_directory:
            return None

        try:
            package, _, directory = classpath_directory.strip("/").partition("/")
            resource = importlib.resources.files(package)
            for part in f"{directory}/{normalize_resource_name(name)}".split("/"):
                if part:
                    resource = resource.joinpath(part)

            if not resource.is_file():
                return None
            return SharedResourceStream(resource.read_bytes())
        except Exception:
            logger.exception("Error getting resource %s from classpath", name)
            return None

    def add_or_update_resource(self, work_area: WorkArea, file: PathLike) -> None:
        """Promote a single staged file to the storage provider."""
        self.add_or_update_resources(work_area, [file])

    @log_execution_time
    def add_or_update_resources(self, work_area: WorkArea, files: Optional[Sequence[PathLike]] = None) -> None:
        """
        Promote staged files to the storage provider in a single batch.

        Args:
            work_area: The work area the files were written to
            files: Files to promote; every file below the work area root
                when omitted

        Raises:
            InvalidOperation: If a file is outside the work area or missing
            StorageFailure: If the provider could not store the files
        """
        if files is None:
            file_list = self._build_file_list(work_area.root_path)
        else:
            file_list = [Path(f) for f in files]

        self._check_files(work_area, file_list)
        self.select_provider().add_or_update_resources(work_area, file_list)

    def select_provider(self, application_type: Optional[FileApplicationType] = None) -> StorageProvider:
        """
        Return the provider that handles the given application type.

        Every application type is served by the default provider.
        """
        return self.default_provider

    def _check_files(self, work_area: WorkArea, file_list: List[Path]) -> None:
        for file_path in file_list:
            if not work_area.contains(file_path):
                raise InvalidOperation(
                    "File operation attempted on file that is not in provided work area. "
                    f"{file_path.absolute()}.  Work area = {work_area.root_path}"
                )
            if not file_path.exists():
                raise InvalidOperation(
                    f"Add or Update Resource called with filename that does not exist.  {file_path.absolute()}"
                )

    def _build_file_list(self, directory: Path) -> List[Path]:
        """Collect every file below ``directory``, descending into subdirectories."""
        file_list: List[Path] = []
        if not directory.is_dir():
            return file_list
        for child in directory.iterdir():
            if child.is_dir():
                file_list.extend(self._build_file_list(child))
            else:
                file_list.append(child)
        return file_list

    def _get_base_directory(self, tenant_id: Optional[Union[str, int]] = None) -> Path:
        """
        Directory that holds all work areas.

        This is the configured base directory, or a directory inside the
        platform temp dir. Tenants get their own subdirectory, bucketed by the
        first two hex characters of a hash of the tenant directory name.
        """
        if self.settings.temp_file_base_directory:
            path = Path(self.settings.temp_file_base_directory).expanduser().absolute()
        else:
            path = Path(tempfile.gettempdir()) / DEFAULT_WORK_AREA_DIRECTORY

        if tenant_id is not None:
            site_directory = f"site-{tenant_id}"
            site_hash = hashlib.md5(site_directory.encode("utf-8")).hexdigest()
            path = path / site_hash[:2] / site_directory

        return path

    def _get_temp_directory(self, base_directory: Path) -> Path:
        """Append random hex levels so no single parent collects thousands of entries."""
        if self.settings.max_generated_directory_depth > MAX_GENERATED_DIRECTORY_DEPTH:
            logger.warning(
                "max_generated_directory_depth set too high, currently set to %d; using %d",
                self.settings.max_generated_directory_depth,
                MAX_GENERATED_DIRECTORY_DEPTH,
            )

        path = base_directory
        for _ in range(self.generated_directory_depth):
            path = path / format(random.randrange(256), "x")
        return path

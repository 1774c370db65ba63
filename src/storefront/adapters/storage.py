"""
Storage providers for promoted work-area files.

A provider persists the files staged in a work area and serves them back by
name. Local disk is used in local-dev mode and S3 in the AWS modes.
"""
import io
import logging
import mimetypes
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Type

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_s3 import S3Client

from storefront.errors import InvalidOperation, StorageFailure
from storefront.file_service.work_area import WorkArea, normalize_resource_name
from storefront.s3.delete_objects import delete_s3_object
from storefront.s3.read_objects import fetch_s3_object, object_exists_in_s3
from storefront.s3.write_objects import upload_s3_object
from storefront.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class StorageProvider(ABC):
    """Durable backend that work-area files are promoted to."""

    @abstractmethod
    def get_resource(self, name: str) -> Optional[BinaryIO]:
        """Open a stored resource

        Args:
            name: Provider-relative resource name

        Returns:
            Readable binary stream, or None if nothing is stored under the name
        """
        pass

    @abstractmethod
    def remove_resource(self, name: str) -> bool:
        """Remove a stored resource

        Args:
            name: Provider-relative resource name

        Returns:
            True if a resource was removed
        """
        pass

    @abstractmethod
    def add_or_update_resources(self, work_area: WorkArea, files: List[Path]) -> None:
        """Persist a batch of staged files

        Files are stored under their path relative to the work-area root.
        Implementations may write the batch in bulk or transactionally.

        Args:
            work_area: The work area the files were staged in
            files: Validated files below the work-area root

        Raises:
            StorageFailure: If any file could not be written
        """
        pass


class LocalStorageProvider(StorageProvider):
    """Stores resources below a directory on the local file system

    Names that resolve outside the directory raise InvalidOperation.
    """

    def __init__(self, storage_dir: Optional[str] = None, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.storage_dir = Path(storage_dir or settings.storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        logger.info("LocalStorageProvider initialized at: %s", self.storage_dir)

    def _path_for(self, name: str) -> Path:
        """Map a resource name to its file, rejecting names that leave ``storage_dir``."""
        path = (self.storage_dir / normalize_resource_name(name)).resolve()
        if self.storage_dir.resolve() not in path.parents:
            raise InvalidOperation(f"Resource name {name} is outside the storage directory {self.storage_dir}")
        return path

    def get_resource(self, name: str) -> Optional[BinaryIO]:
        path = self._path_for(name)
        if not path.is_file():
            logger.debug("Resource %s not found in %s", name, self.storage_dir)
            return None
        return open(path, "rb")

    def remove_resource(self, name: str) -> bool:
        path = self._path_for(name)
        if not path.is_file():
            return False
        path.unlink()
        logger.info("Removed resource %s", name)
        return True

    def add_or_update_resources(self, work_area: WorkArea, files: List[Path]) -> None:
        for file_path in files:
            name = work_area.resource_name(file_path)
            dest_path = self._path_for(name)
            try:
                dest_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(str(file_path), str(dest_path))
            except OSError as e:
                logger.error(f"Error storing {file_path} as {name}: {str(e)}")
                raise StorageFailure(f"Unable to store {file_path} as {name}") from e
            logger.debug("Stored %s as %s", file_path, name)
        logger.info("Stored %d file(s) in %s", len(files), self.storage_dir)


class S3StorageProvider(StorageProvider):
    """Stores resources as objects in an S3 bucket"""

    def __init__(
        self,
        bucket_name: Optional[str] = None,
        s3_client: Optional[S3Client] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.bucket_name = bucket_name or settings.s3_bucket_name
        self.s3_client = s3_client or boto3.client(
            "s3",
            endpoint_url=settings.aws_endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )

        logger.info(f"S3StorageProvider initialized")
        logger.info(f"  Bucket: {self.bucket_name}")
        logger.info(f"  Endpoint: {settings.aws_endpoint_url}")

    def get_resource(self, name: str) -> Optional[BinaryIO]:
        response = fetch_s3_object(
            self.bucket_name,
            normalize_resource_name(name),
            s3_client=self.s3_client,
        )
        if response is None:
            logger.debug("Object %s not found in bucket %s", name, self.bucket_name)
            return None
        return io.BytesIO(response["Body"].read())

    def remove_resource(self, name: str) -> bool:
        object_key = normalize_resource_name(name)
        if not object_exists_in_s3(self.bucket_name, object_key, s3_client=self.s3_client):
            return False
        delete_s3_object(self.bucket_name, object_key, s3_client=self.s3_client)
        logger.info(f"Deleted s3://{self.bucket_name}/{object_key}")
        return True

    def add_or_update_resources(self, work_area: WorkArea, files: List[Path]) -> None:
        for file_path in files:
            object_key = work_area.resource_name(file_path)
            content_type, _ = mimetypes.guess_type(str(file_path))
            try:
                with open(file_path, "rb") as file_data:
                    upload_s3_object(
                        bucket_name=self.bucket_name,
                        object_key=object_key,
                        file_content=file_data,
                        content_type=content_type,
                        s3_client=self.s3_client,
                    )
            except (OSError, ClientError, BotoCoreError) as e:
                logger.error(f"Error uploading {file_path} to S3: {str(e)}")
                raise StorageFailure(f"Unable to upload {file_path} as {object_key}") from e
            logger.debug(f"Uploaded {file_path} to S3 as {object_key}")
        logger.info(f"Uploaded {len(files)} file(s) to bucket {self.bucket_name}")


class StorageProviderFactory:
    """Factory to initialize the correct storage provider based on deployment mode"""

    provider_classes: Dict[str, Type[StorageProvider]] = {
        "local-dev": LocalStorageProvider,
        "aws-mock": S3StorageProvider,
        "aws-prod": S3StorageProvider,
    }

    @classmethod
    def get_storage_provider(cls, settings: Optional[Settings] = None) -> StorageProvider:
        settings = settings or get_settings()

        deployment_mode = settings.deployment_mode
        if deployment_mode not in cls.provider_classes:
            raise ValueError(
                f"Invalid deployment_mode: {deployment_mode}. "
                f"Choose from {list(cls.provider_classes.keys())}"
            )

        logger.info(f"Creating storage provider for mode: {deployment_mode}")
        return cls.provider_classes[deployment_mode](settings=settings)

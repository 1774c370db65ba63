import boto3
import pytest
from moto import mock_aws

from storefront.file_service.service import FileService
from storefront.settings import Settings, get_settings
from tests.consts import TEST_BUCKET_NAME
from tests.fixtures.storage_fixtures import RecordingStorageProvider


@pytest.fixture(autouse=True)
def fresh_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mocked_aws(monkeypatch):
    """Point boto3 at moto and create the test bucket."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)

    with mock_aws():
        s3_client = boto3.client("s3", region_name="us-east-1")
        s3_client.create_bucket(Bucket=TEST_BUCKET_NAME)
        yield


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        deployment_mode="local-dev",
        temp_file_base_directory=str(tmp_path / "work"),
        storage_dir=str(tmp_path / "storage"),
        max_generated_directory_depth=0,
        s3_bucket_name=TEST_BUCKET_NAME,
    )


@pytest.fixture
def recording_provider() -> RecordingStorageProvider:
    return RecordingStorageProvider()


@pytest.fixture
def file_service(settings, recording_provider) -> FileService:
    return FileService(settings=settings, default_provider=recording_provider)

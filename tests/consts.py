"""Constants shared by the test suite."""

TEST_BUCKET_NAME = "test-bucket-storefront"
TEST_TENANT_ID = 42
TEST_FILE_CONTENT = b"Hello, world!"
TEST_PNG_CONTENT = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"

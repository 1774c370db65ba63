"""Thin wrappers over boto3 S3 calls used by the S3 storage provider."""

"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import Optional

import boto3
from botocore.exceptions import ClientError
from mypy_boto3_s3 import S3Client
from mypy_boto3_s3.type_defs import GetObjectOutputTypeDef

MISSING_OBJECT_ERROR_CODES = ("404", "NoSuchKey", "NotFound")


def object_exists_in_s3(bucket_name: str, object_key: str, s3_client: Optional[S3Client] = None) -> bool:
    """
    Check if an object exists in the S3 bucket using head_object.

    :param bucket_name: Name of the S3 bucket.
    :param object_key: Key of the object to check.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.

    :return: True if the object exists, False otherwise.
    """
    s3_client = s3_client or boto3.client("s3")
    try:
        s3_client.head_object(Bucket=bucket_name, Key=object_key)
        return True
    except ClientError as err:
        if err.response.get("Error", {}).get("Code") in MISSING_OBJECT_ERROR_CODES:
            return False
        raise


def fetch_s3_object(
    bucket_name: str,
    object_key: str,
    s3_client: Optional[S3Client] = None,
) -> Optional[GetObjectOutputTypeDef]:
    """
    Fetch an object from an S3 bucket.

    :param bucket_name: Name of the S3 bucket.
    :param object_key: Key of the S3 object.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.

    :return: The get_object response, or None when the object does not exist.
    """
    s3_client = s3_client or boto3.client("s3")
    try:
        return s3_client.get_object(Bucket=bucket_name, Key=object_key)
    except ClientError as err:
        if err.response.get("Error", {}).get("Code") in MISSING_OBJECT_ERROR_CODES:
            return None
        raise

"""
Adapter layer for the storefront services.

Contains the storage provider abstraction with local-disk and S3
implementations, selected by deployment mode.
"""

"""
Storefront services: work-area file staging with pluggable storage providers,
and HTML email composition.
"""

__version__ = "0.1.0"

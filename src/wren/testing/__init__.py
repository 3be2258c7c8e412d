"""Test utilities for wren applications.

    from wren.testing import TestClient
"""

from wren.testing.client import TestClient, encode_multipart

__all__ = ["TestClient", "encode_multipart"]

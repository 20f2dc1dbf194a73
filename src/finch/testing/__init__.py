"""Test utilities for finch servers::

    from finch.testing import TestClient
"""

from finch.testing.client import TestClient, TestResponse

__all__ = ["TestClient", "TestResponse"]

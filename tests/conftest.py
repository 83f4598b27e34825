from __future__ import annotations

import pytest

from vibeflow.services import digest


@pytest.fixture(autouse=True)
def _fresh_digest_cache():
    """Digests are cached per process; keep tests independent of each other."""
    digest._digest_cache.clear()
    yield
    digest._digest_cache.clear()

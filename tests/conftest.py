import os
import sys

import pytest

# Ensure project root is on sys.path so 'bloomee' and 'tests' import without installation
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from bloomee.errors import ProviderError  # noqa: E402
from tests.support import FakeFetcher  # noqa: E402


@pytest.fixture
def failing_fetcher():
    def _build(name):
        return FakeFetcher(name, error=ProviderError(f"{name} is down", details="HTTP 503", provider=name))
    return _build

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    # CLI tests configure structlog against a stream that is closed afterwards.
    yield
    structlog.reset_defaults()

import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger():
    """configure_logging replaces root handlers; put the test runner's back afterwards."""

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)

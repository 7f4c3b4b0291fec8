import logging
import pytest

@pytest.fixture
def pkg_caplog(caplog):
    """
    The package logger doesn't propagate to the root logger, so attach
    the capture handler to it directly.
    """
    logger = logging.getLogger('pyminicam')
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger='pyminicam')
    yield caplog
    logger.removeHandler(caplog.handler)

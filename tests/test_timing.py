import logging

import pytest

from tsec_scraper.utils.timing import timed_operation


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


@pytest.fixture
def timing_logger():
    logger = logging.getLogger("tsec_scraper.tests.timing")
    logger.setLevel(logging.DEBUG)
    handler = ListHandler()
    logger.addHandler(handler)
    yield logger, handler
    logger.removeHandler(handler)


def test_successful_block_is_logged(timing_logger):
    logger, handler = timing_logger

    with timed_operation("fetch ward 3", logger) as timing:
        pass

    assert timing.success
    assert timing.duration_sec >= 0
    assert handler.messages[0].startswith("fetch ward 3 took ")


def test_failure_propagates_and_is_logged(timing_logger):
    logger, handler = timing_logger

    with pytest.raises(ValueError):
        with timed_operation("upload ward 3", logger) as timing:
            raise ValueError("boom")

    assert not timing.success
    assert handler.messages[0].endswith("failed: boom")

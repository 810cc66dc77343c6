import logging

from rich.logging import RichHandler

from tsec_scraper.logger import ROOT_LOGGER, get_logger, setup_logger


def test_module_loggers_share_package_handlers():
    crawler_logger = get_logger("tsec_scraper.crawler")
    get_logger("tsec_scraper.delivery.http_upload")
    get_logger("VoterListExtractor")

    package_logger = logging.getLogger(ROOT_LOGGER)
    assert crawler_logger.handlers == []
    assert crawler_logger.propagate
    assert sum(isinstance(h, RichHandler) for h in package_logger.handlers) == 1


def test_extractor_names_are_placed_under_package():
    logger = get_logger("PollingStationExtractor")

    assert logger.name == "tsec_scraper.PollingStationExtractor"
    assert logger.handlers == []
    assert get_logger(ROOT_LOGGER).name == ROOT_LOGGER


def test_file_handler_is_attached_once(tmp_path):
    name = "tsec_scraper_file_handlers"
    try:
        setup_logger(name, log_dir=tmp_path, log_to_file=True)
        logger = setup_logger(name, log_dir=tmp_path, log_to_file=True)
        logger.debug("written once")

        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        (log_file,) = tmp_path.glob("tsec_*.log")
        file_handlers[0].flush()
        assert log_file.read_text(encoding="utf-8").count("written once") == 1
    finally:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

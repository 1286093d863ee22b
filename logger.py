"""
Custom Logging Module
^^^^^^^^^^^^^^^^^^^^^
Provides a setup_logger function to configure the logger using the file
named by `GasMeterConfig.LOGGER_CONFIG` (logger.cfg by default).
"""
import configparser
import logging
import logging.config

from config import GasMeterConfig


def setup_logger(name):
    """
    Set up a logger with the provided name using the 'logger.cfg' file.
    """
    config = configparser.ConfigParser()
    config.read(GasMeterConfig().LOGGER_CONFIG)
    if config.has_section("loggers"):
        logging.config.fileConfig(config, disable_existing_loggers=False)

    logger = logging.getLogger(name)

    return logger

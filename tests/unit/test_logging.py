# tests/unit/test_logging.py
import logging

from bundle_sources.core.logging import setup_logging


def test_setup_logging_configures_app_namespace():
    setup_logging("debug")
    try:
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert logging.getLogger("bundle_sources").level == logging.DEBUG
        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO

        setup_logging("INFO")
        assert len(root.handlers) == 1
        assert logging.getLogger("bundle_sources").level == logging.INFO
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        setup_logging("INFO")

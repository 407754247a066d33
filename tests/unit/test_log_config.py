"""Unit tests for the per-category logging setup."""

import logging

from medadmin.config import Settings
from medadmin.infrastructure.logging.log_config import setup_logging


def test_category_levels_are_applied():
    settings = Settings(
        _env_file=None,
        log_level="WARNING",
        log_level_sql="ERROR",
        log_level_sync="DEBUG",
        log_level_firebase="not-a-level",
    )

    setup_logging(settings)

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR
    assert logging.getLogger("MutationCoordinator").level == logging.DEBUG
    assert logging.getLogger("medadmin.infrastructure.firebase").level == logging.INFO

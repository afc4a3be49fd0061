import logging
from contextlib import contextmanager

from django.db import DatabaseError, transaction

from .exceptions import TransactionFailure

logger = logging.getLogger(__name__)


@contextmanager
def atomic_operation(description):
    """
    Run a multi-row mutation in one transaction.

    Business-rule errors raised inside roll back and propagate unchanged; a
    database error rolls back and surfaces as TransactionFailure.
    """
    try:
        with transaction.atomic():
            yield
    except DatabaseError as e:
        logger.exception(f"{description} failed and was rolled back")
        raise TransactionFailure(f"{description} failed: {e}") from e

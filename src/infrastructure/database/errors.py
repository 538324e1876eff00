"""Translation of database faults into domain storage errors."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import StorageFailureError


@contextmanager
def storage_errors() -> Iterator[None]:
    """Re-raise driver and connection faults as ``StorageFailureError``."""
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        raise StorageFailureError() from exc

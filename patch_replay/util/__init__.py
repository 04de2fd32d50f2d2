from .logging import setup_logging
from .records import list_run_records, utc_timestamp, write_run_record
from .timing import log_timing

__all__ = [
    "setup_logging",
    "list_run_records",
    "utc_timestamp",
    "write_run_record",
    "log_timing",
]

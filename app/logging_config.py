import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Per-request chatter from the storage SDKs
NOISY_LOGGERS = ("botocore", "boto3", "urllib3")


def setup_logging(log_file: str = "", level: str = "INFO") -> None:
    """Route everything to stdout, and to log_file when one is given."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

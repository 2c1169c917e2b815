import logging
import sys


class ContextFormatter(logging.Formatter):
    """Formatter that fills in the optional target and stage fields."""
    def format(self, record):
        if not hasattr(record, 'target'):
            record.target = '-'
        if not hasattr(record, 'stage'):
            record.stage = '-'
        return super().format(record)


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(
        "%(asctime)s %(levelname)s %(name)s [target=%(target)s stage=%(stage)s] - %(message)s"
    ))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )

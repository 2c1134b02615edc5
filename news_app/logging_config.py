"""
Logging configuration for the application.

``setup_logging`` attaches a console handler to the root logger exactly
once; modules log through ``logging.getLogger(__name__)``.
"""
import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger unless it already has handlers."""
    root = logging.getLogger()
    if root.handlers:
        # Already configured (tests, reloads, embedding servers).
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)

import logging
import os

_FORMAT = "[Pranayama] %(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level=None) -> None:
    """Set up console logging once. PRANAYAMA_LOG_LEVEL overrides the default level."""
    if level is None:
        level = os.environ.get("PRANAYAMA_LOG_LEVEL", "INFO").upper()

    root = logging.getLogger("pranayama")
    if any(getattr(h, "_pranayama", False) for h in root.handlers):
        root.setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    handler._pranayama = True
    root.addHandler(handler)
    root.setLevel(level)

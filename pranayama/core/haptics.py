import logging
import sys

from pranayama.core.settings_store import AppSettings

logger = logging.getLogger(__name__)

_performer = None


def _mac_performer():
    global _performer
    if _performer is None:
        from AppKit import NSHapticFeedbackManager
        _performer = NSHapticFeedbackManager.defaultPerformer()
    return _performer


def pulse() -> bool:
    """
    One short haptic pulse that won't crash:
    - macOS: Force Touch trackpad via NSHapticFeedbackManager
    - elsewhere: no haptic device, no-op

    Returns True if a pulse was actually sent.
    """
    try:
        if sys.platform == "darwin":
            from AppKit import (
                NSHapticFeedbackPatternGeneric,
                NSHapticFeedbackPerformanceTimeNow,
            )
            _mac_performer().performFeedbackPattern_performanceTime_(
                NSHapticFeedbackPatternGeneric,
                NSHapticFeedbackPerformanceTimeNow,
            )
            return True
    except Exception:
        logger.debug("Haptic pulse unavailable", exc_info=True)
        return False

    logger.debug("No haptic device on %s", sys.platform)
    return False


class HapticSink:
    """Callable handed to the engine as trigger_haptic."""

    def __init__(self, settings: AppSettings, backend=pulse):
        self.settings = settings
        self._backend = backend

    def __call__(self) -> None:
        if not self.settings.haptics_enabled:
            return
        self._backend()

"""Backend reachability, probed once and cached until refreshed."""

from __future__ import annotations

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ConnectivityState:
    def __init__(self, probe: Callable[[], bool]):
        self.probe = probe
        self.available: Optional[bool] = None

    def check(self) -> bool:
        if self.available is None:
            try:
                self.available = bool(self.probe())
            except Exception as exc:
                logger.warning("Connectivity probe failed: %s", exc)
                self.available = False
            logger.info("Backend %s", "available" if self.available else "unavailable, using local store")
        return self.available

    def refresh(self) -> bool:
        self.available = None
        return self.check()

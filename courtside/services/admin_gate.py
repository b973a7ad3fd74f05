"""Password gate for administrative actions."""

import hmac
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class AdminGate:
    """Checks a submitted password against the configured admin password."""

    def __init__(self, password: Optional[str] = None):
        self._password = (password or "").strip()

    @property
    def configured(self) -> bool:
        return bool(self._password)

    def verify(self, password: Optional[str]) -> bool:
        """Return True when ``password`` matches; an unconfigured gate denies everything."""
        if not self.configured:
            logger.warning("Admin password is not configured; denying admin access")
            return False
        candidate = str(password or "").strip()
        return hmac.compare_digest(candidate.encode("utf-8"), self._password.encode("utf-8"))

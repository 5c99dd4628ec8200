"""Form nonces signed with HMAC-SHA256."""

import hashlib
import hmac
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class NonceManager:
    """Creates and checks tokens tied to an action name and the process secret."""

    def __init__(self, secret: str):
        self._secret = secret.encode("utf-8")

    def create(self, action: str) -> str:
        return hmac.new(self._secret, action.encode("utf-8"), hashlib.sha256).hexdigest()

    def verify(self, token: Optional[str], action: str) -> bool:
        if not token:
            logger.warning("Missing nonce for action '%s'", action)
            return False
        valid = hmac.compare_digest(token.encode("utf-8"), self.create(action).encode("utf-8"))
        if not valid:
            logger.warning("Invalid nonce for action '%s'", action)
        return valid

"""Turn exceptions into notices the dashboard can display."""
from typing import Any, Dict, Optional
import logging

from finbins.integrations.policy.response_wrappers import ApiError, SessionError

logger = logging.getLogger(__name__)

GENERIC_DESCRIPTION = "Something went wrong. Please try again later."


class ErrorHandler:
    def to_notice(self, exc: Exception, title: str = "Error", context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Build a destructive toast payload; ApiError/SessionError messages are shown verbatim."""
        if isinstance(exc, (ApiError, SessionError)):
            logger.warning("%s: %s", title, exc.message)
            description = exc.message
        else:
            logger.error("Unhandled exception: %s", exc, exc_info=True)
            description = GENERIC_DESCRIPTION
        return {
            "title": title,
            "description": description,
            "variant": "destructive",
            "metadata": {
                "error": str(exc),
                "kind": getattr(getattr(exc, "kind", None), "value", None),
                "status_code": getattr(exc, "status_code", None),
                "context": context or {},
            },
        }

    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in API: %s", exc, exc_info=True)
        return {
            "message": "Internal server error",
            "metadata": {"error": str(exc), "context": context or {}},
        }

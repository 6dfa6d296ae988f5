from .dto import JOIN_ERROR_MESSAGES, REAUTHORIZE_ERRORS, JoinError, JoinResult
from .orchestrator import JoinOrchestrator

__all__ = [
    "JOIN_ERROR_MESSAGES",
    "REAUTHORIZE_ERRORS",
    "JoinError",
    "JoinOrchestrator",
    "JoinResult",
]

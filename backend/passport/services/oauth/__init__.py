from .coordinator import DEFAULT_SCOPES, OAuthExchangeCoordinator
from .sweeper import PendingAuthorizationSweeper

__all__ = ["DEFAULT_SCOPES", "OAuthExchangeCoordinator", "PendingAuthorizationSweeper"]

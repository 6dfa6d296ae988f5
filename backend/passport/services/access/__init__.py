from .dto import AccessDecision, AccessibleServer, AccessListing, HolderEntry, HolderListing
from .resolver import AccessResolver

__all__ = [
    "AccessDecision",
    "AccessResolver",
    "AccessibleServer",
    "AccessListing",
    "HolderEntry",
    "HolderListing",
]

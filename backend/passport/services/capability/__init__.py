from .codec import DEFAULT_TTL_SECONDS, CapabilityCodec, mint, verify

__all__ = ["DEFAULT_TTL_SECONDS", "CapabilityCodec", "mint", "verify"]

from .identity import IdentityProvider, SessionIdentityProvider

__all__ = ["IdentityProvider", "SessionIdentityProvider"]

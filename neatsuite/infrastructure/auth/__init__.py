"""Request authentication (OAuth 1.0a token based authentication)."""

from .oauth_signer import OAuthSigner

__all__ = ["OAuthSigner"]

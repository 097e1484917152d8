"""
TokenForge: OAuth 2.0 token endpoint

Issues access tokens for the client credentials, resource owner password and
refresh token grants.
"""

__version__ = "0.1.0"

from .oauth.endpoint import TokenEndpoint

__all__ = ["TokenEndpoint", "__version__"]

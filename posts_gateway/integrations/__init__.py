"""Clients for the external APIs this service proxies."""

from posts_gateway.integrations.upstream import UpstreamClient

__all__ = ["UpstreamClient"]

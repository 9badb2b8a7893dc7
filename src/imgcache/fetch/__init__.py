"""Origin tier: remote fetching over HTTP."""

from imgcache.fetch.client import HttpFetcher, RemoteFetcher

__all__ = ["HttpFetcher", "RemoteFetcher"]

"""
Cache utilities for the family pick'em
Provides a route caching decorator and invalidation after writes
"""

import functools

from flask import current_app, request

from app import cache

GENERATION_KEY = "route_cache_generation"


def _generation():
    return cache.get(GENERATION_KEY) or 0


def make_cache_key(*args, **kwargs):
    """Generate a cache key from request path, query string and arguments"""
    path = request.full_path if request.query_string else request.path
    args_str = "_".join(str(arg) for arg in args)
    kwargs_str = "_".join(f"{k}_{v}" for k, v in sorted(kwargs.items()))
    return f"{path}_{args_str}_{kwargs_str}".replace("/", "_")


def cached_route(timeout=300, key_prefix="view"):
    """
    Decorator for caching route responses

    Args:
        timeout: Cache timeout in seconds (default 5 minutes)
        key_prefix: Prefix for cache key
    """

    def decorator(f):
        @functools.wraps(f)
        def wrapped(*args, **kwargs):
            cache_key = (
                f"{key_prefix}_{_generation()}_{make_cache_key(*args, **kwargs)}"
            )

            result = cache.get(cache_key)
            if result is not None:
                current_app.logger.debug(f"Cache hit for key: {cache_key}")
                return result

            result = f(*args, **kwargs)
            cache.set(cache_key, result, timeout=timeout)
            current_app.logger.debug(f"Cache set for key: {cache_key}")

            return result

        return wrapped

    return decorator


def invalidate_route_cache():
    """
    Drop every cached route response.

    Keys embed a generation number, so bumping it orphans old entries while
    leaving the last-known-good standings in place.
    """
    cache.set(GENERATION_KEY, _generation() + 1, timeout=0)
    current_app.logger.debug("Route cache invalidated")

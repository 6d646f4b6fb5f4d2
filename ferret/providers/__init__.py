"""Concrete search backends and the bootstrap that registers them."""

from typing import Optional

from ferret.search.registry import ProviderRegistry
from ferret.shared.settings import FerretSettings, get_settings

from .github import GithubSearchProvider
from .simulated import SimulatedSearchProvider


def build_registry(settings: Optional[FerretSettings] = None) -> ProviderRegistry:
    """Create a registry holding every bundled provider, configured from settings."""
    settings = settings or get_settings()

    token = settings.github_token.get_secret_value() if settings.github_token else None

    registry = ProviderRegistry()
    registry.register(GithubSearchProvider(
        url=settings.github_url,
        token=token,
        search_user=settings.github_search_user,
    ))
    registry.register(SimulatedSearchProvider())
    return registry


__all__ = [
    "GithubSearchProvider",
    "SimulatedSearchProvider",
    "build_registry",
]

"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from engage.config import (
    AuthSettings,
    CacheSettings,
    ListingSettings,
    Settings,
    VotingSettings,
)
from engage.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_cache_settings(self, settings: Settings) -> CacheSettings:
        """Provide response cache settings."""
        return settings.cache

    @provide(scope=Scope.APP)
    def provide_voting_settings(self, settings: Settings) -> VotingSettings:
        """Provide vote ledger settings."""
        return settings.voting

    @provide(scope=Scope.APP)
    def provide_listing_settings(self, settings: Settings) -> ListingSettings:
        """Provide listing settings."""
        return settings.listing

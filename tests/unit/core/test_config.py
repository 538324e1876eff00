"""Unit tests for Settings parsing."""

from core.config import Settings


class TestSettings:
    def test_banned_words_override_is_parsed(self):
        settings = Settings(banned_display_name_words=" Foo, bar ,,BAZ ")

        assert settings.banned_display_name_words_list == ["foo", "bar", "baz"]

    def test_empty_banned_words_keeps_builtin_list(self):
        settings = Settings(banned_display_name_words="")

        assert settings.banned_display_name_words_list == []

    def test_plain_postgres_url_gets_asyncpg_driver(self):
        settings = Settings(database_url="postgresql://u:p@db:5432/profiles")

        assert settings.async_database_url == "postgresql+asyncpg://u:p@db:5432/profiles"

    def test_cooldown_defaults(self):
        settings = Settings()

        assert settings.name_change_cooldown_hours == 24
        assert settings.profile_save_timeout_seconds == 5.0

    def test_jwks_url_derived_from_supabase_url(self):
        settings = Settings(supabase_url="https://xyz.supabase.co/")

        assert settings.supabase_jwks_url == "https://xyz.supabase.co/auth/v1/.well-known/jwks.json"

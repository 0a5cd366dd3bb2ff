"""
Unit tests for settings.
"""

from hiprompt.settings import LikesSettings, SupabaseSettings


class TestSupabaseSettings:
    def test_missing_values(self):
        config = SupabaseSettings(url="", anon_key="", _env_file=None)

        assert not config.is_configured()
        assert config.missing_fields() == ["SUPABASE__URL", "SUPABASE__ANON_KEY"]

    def test_placeholders_count_as_missing(self):
        config = SupabaseSettings(
            url="https://placeholder.supabase.co", anon_key="real-key", _env_file=None
        )

        assert config.missing_fields() == ["SUPABASE__URL"]

    def test_vite_variable_names(self, monkeypatch):
        monkeypatch.delenv("SUPABASE__URL", raising=False)
        monkeypatch.delenv("SUPABASE__ANON_KEY", raising=False)
        monkeypatch.setenv("VITE_SUPABASE_URL", "https://demo.supabase.co")
        monkeypatch.setenv("VITE_SUPABASE_ANON_KEY", "anon")

        config = SupabaseSettings(_env_file=None)

        assert config.url == "https://demo.supabase.co"
        assert config.is_configured()


class TestLikesSettings:
    def test_default_strategy(self, monkeypatch):
        monkeypatch.delenv("LIKES__COUNTER_STRATEGY", raising=False)

        assert LikesSettings(_env_file=None).counter_strategy == "increment"

    def test_strategy_from_environment(self, monkeypatch):
        monkeypatch.setenv("LIKES__COUNTER_STRATEGY", "recount")

        assert LikesSettings(_env_file=None).counter_strategy == "recount"

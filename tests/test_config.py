from deskclock.utils.config import Settings, load_settings

ENV_VARS = (
    "DESKCLOCK_DB_PATH", "DESKCLOCK_TIMEZONE", "DESKCLOCK_LOCATION", "DESKCLOCK_LATITUDE",
    "DESKCLOCK_LONGITUDE", "DESKCLOCK_WEATHER_REFRESH_S", "DESKCLOCK_HOST", "DESKCLOCK_PORT",
)


def clear_env(monkeypatch):
    # also removes anything load_dotenv sets during the test
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch, tmp_path):
    clear_env(monkeypatch)
    settings = load_settings(str(tmp_path / "missing.env"))

    assert settings.timezone is None
    assert settings.weather_refresh_s == 600.0
    assert settings.port == 8000
    assert not settings.has_location


def test_environment_overrides(monkeypatch, tmp_path):
    clear_env(monkeypatch)
    monkeypatch.setenv("DESKCLOCK_DB_PATH", str(tmp_path / "c.db"))
    monkeypatch.setenv("DESKCLOCK_TIMEZONE", "Europe/Lisbon")
    monkeypatch.setenv("DESKCLOCK_LATITUDE", "38.7")
    monkeypatch.setenv("DESKCLOCK_LONGITUDE", "-9.1")
    monkeypatch.setenv("DESKCLOCK_PORT", "9000")
    settings = load_settings(str(tmp_path / "missing.env"))

    assert settings.db_path == str(tmp_path / "c.db")
    assert settings.timezone == "Europe/Lisbon"
    assert (settings.latitude, settings.longitude) == (38.7, -9.1)
    assert settings.port == 9000
    assert settings.has_location


def test_dotenv_file_is_read(monkeypatch, tmp_path):
    clear_env(monkeypatch)
    env_file = tmp_path / ".env"
    env_file.write_text("DESKCLOCK_LOCATION=Porto\nDESKCLOCK_WEATHER_REFRESH_S=120\n")
    settings = load_settings(str(env_file))

    assert settings.location == "Porto"
    assert settings.weather_refresh_s == 120.0
    assert settings.has_location


def test_half_a_coordinate_is_not_a_location():
    assert not Settings(latitude=1.0).has_location

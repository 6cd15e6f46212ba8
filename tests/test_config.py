import pytest

from config.loader import ConfigLoader


@pytest.fixture
def loader(tmp_path):
    return ConfigLoader(env_path=str(tmp_path / "missing.env"))


@pytest.mark.parametrize(
    "raw,default,expected",
    [
        ("25", 10.0, 25.0),
        ("7", 3, 7),
        ("yes", False, True),
        ("0", True, False),
        ("401", (401, 403), (401,)),
        ("401, 403, 419", (401, 403), (401, 403, 419)),
        ("https://staging.example", "https://prod.example", "https://staging.example"),
    ],
)
def test_env_value_is_coerced_to_default_type(loader, monkeypatch, raw, default, expected):
    monkeypatch.setenv("SUBLITE_TEST_VALUE", raw)
    assert loader.get("SUBLITE_TEST_VALUE", default) == expected


@pytest.mark.parametrize(
    "raw,default",
    [
        ("soon", 15.0),
        ("many", 3),
        ("401,forbidden", (401, 403)),
    ],
)
def test_unparseable_value_falls_back_to_default(loader, monkeypatch, raw, default):
    monkeypatch.setenv("SUBLITE_TEST_VALUE", raw)
    assert loader.get("SUBLITE_TEST_VALUE", default) == default


def test_default_home_path_is_expanded(loader, monkeypatch):
    monkeypatch.delenv("SUBLITE_TEST_PATH", raising=False)
    assert not loader.get("SUBLITE_TEST_PATH", "~/session.json").startswith("~")


def test_env_file_is_loaded(tmp_path, monkeypatch):
    # setenv first so monkeypatch also removes what load_dotenv adds
    monkeypatch.setenv("SUBLITE_TEST_FROM_FILE", "placeholder")
    monkeypatch.delenv("SUBLITE_TEST_FROM_FILE")
    env_file = tmp_path / ".env"
    env_file.write_text("SUBLITE_TEST_FROM_FILE=42\n")

    loader = ConfigLoader(env_path=str(env_file))

    assert loader.get("SUBLITE_TEST_FROM_FILE", 0) == 42

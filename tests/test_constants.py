from config.constants import get_float_env, get_int_env


def test_env_helpers_read_values(monkeypatch):
    monkeypatch.setenv("INFERENCE_TIMEOUT", "12.5")
    monkeypatch.setenv("INFERENCE_MAX_RETRIES", "4")

    assert get_float_env("INFERENCE_TIMEOUT", 30.0) == 12.5
    assert get_int_env("INFERENCE_MAX_RETRIES", 2) == 4


def test_env_helpers_fall_back_on_malformed_values(monkeypatch):
    monkeypatch.setenv("INFERENCE_TIMEOUT", "thirty")
    monkeypatch.setenv("INFERENCE_MAX_RETRIES", "2.5")

    assert get_float_env("INFERENCE_TIMEOUT", 30.0) == 30.0
    assert get_int_env("INFERENCE_MAX_RETRIES", 2) == 2


def test_env_helpers_default_when_unset(monkeypatch):
    monkeypatch.delenv("INFERENCE_BACKOFF", raising=False)
    assert get_float_env("INFERENCE_BACKOFF", 1.0) == 1.0

"""Tests for configuration defaults, settings file and environment overrides."""

import json

import pytest

from docrag.config import DEFAULT_SYSTEM_PROMPT, RagConfig, load_config
from docrag.errors import ConfigurationError


def test_defaults():
    cfg = RagConfig()

    assert (cfg.chunk_size, cfg.chunk_overlap, cfg.top_k) == (1000, 200, 3)
    assert cfg.system_prompt == DEFAULT_SYSTEM_PROMPT
    assert cfg.embed_model == "nomic-embed-text"
    assert cfg.chat_model == "llama3.2:1b"
    assert cfg.ollama_host == "http://localhost:11434"
    assert cfg.validate() is cfg


@pytest.mark.parametrize(
    "overrides",
    [
        {"chunk_size": 0},
        {"chunk_overlap": -1},
        {"chunk_size": 100, "chunk_overlap": 100},
        {"top_k": 0},
        {"ollama_host": ""},
    ],
)
def test_validate_rejects_bad_values(overrides):
    with pytest.raises(ConfigurationError):
        RagConfig(**overrides).validate()


def test_missing_settings_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "nope.json") == RagConfig()


def test_settings_file_overrides_defaults(tmp_path):
    settings = tmp_path / "settings.json"
    settings.write_text(
        json.dumps({"chunk_size": 500, "chunk_overlap": 50, "top_k": 5, "chat_model": "qwen2.5:3b"}),
        encoding="utf-8",
    )

    cfg = load_config(settings)

    assert (cfg.chunk_size, cfg.chunk_overlap, cfg.top_k) == (500, 50, 5)
    assert cfg.chat_model == "qwen2.5:3b"
    assert cfg.embed_model == "nomic-embed-text"


def test_ill_typed_settings_are_ignored(tmp_path):
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"top_k": "7", "chunk_size": True, "chat_model": 3}), encoding="utf-8")

    assert load_config(settings) == RagConfig()


def test_unparseable_settings_are_ignored(tmp_path):
    settings = tmp_path / "settings.json"
    settings.write_text("{not json", encoding="utf-8")

    assert load_config(settings) == RagConfig()


def test_settings_with_invalid_values_fail(tmp_path):
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"chunk_size": 100, "chunk_overlap": 150}), encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(settings)


def test_default_settings_path_is_under_cwd(tmp_path, monkeypatch):
    (tmp_path / ".docrag").mkdir()
    (tmp_path / ".docrag" / "settings.json").write_text(json.dumps({"top_k": 9}), encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert load_config().top_k == 9


def test_environment_beats_settings_file(tmp_path, monkeypatch):
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"top_k": 5, "ollama_host": "http://file:11434"}), encoding="utf-8")
    monkeypatch.setenv("DOCRAG_TOP_K", "8")
    monkeypatch.setenv("DOCRAG_OLLAMA_HOST", "http://env:11434")
    monkeypatch.setenv("DOCRAG_EMBED_MODEL", "mxbai-embed-large")

    cfg = load_config(settings)

    assert cfg.top_k == 8
    assert cfg.ollama_host == "http://env:11434"
    assert cfg.embed_model == "mxbai-embed-large"


def test_non_integer_environment_value(tmp_path, monkeypatch):
    monkeypatch.setenv("DOCRAG_TOP_K", "many")

    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "nope.json")

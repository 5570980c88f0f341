"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest

from knowledgenet.config import EngineConfig, create_default_config, load_config


def test_defaults():
    config = EngineConfig()
    assert config.knowledge.files == []
    assert config.knowledge.delimiter == ";"
    assert config.search.forward_score == 50.0
    assert config.search.max_depth == 10
    assert config.logging.level == "WARNING"


def test_default_config_round_trip(tmp_path):
    path = tmp_path / "knowledgenet.toml"
    create_default_config(path, name="pets", knowledge_files=["pet_data.txt"])

    config = load_config(path)

    assert config.name == "pets"
    assert config.knowledge.files == [Path("pet_data.txt")]
    assert config.knowledge.resolve_files(tmp_path) == [tmp_path / "pet_data.txt"]


def test_partial_config(tmp_path):
    path = tmp_path / "knowledgenet.toml"
    path.write_text('[search]\nforward_score = 75\n\n[logging]\nlevel = "debug"\n', encoding="utf-8")

    config = load_config(path)

    assert config.search.forward_score == 75.0
    assert config.search.backward_score == 50.0
    assert config.logging.level == "DEBUG"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.toml")


@pytest.mark.parametrize(
    "content",
    [
        "[search]\nforward_score = 150\n",
        '[knowledge]\ndelimiter = ","\n',
        '[logging]\nlevel = "LOUD"\n',
        "this is not toml",
    ],
)
def test_invalid_config(tmp_path, content):
    path = tmp_path / "knowledgenet.toml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_absolute_files_are_kept(tmp_path):
    config = EngineConfig(knowledge={"files": [str(tmp_path / "kb.txt")]})
    assert config.knowledge.resolve_files(Path("/elsewhere")) == [tmp_path / "kb.txt"]

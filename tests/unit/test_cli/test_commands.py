"""
Smoke tests for the CLI commands.
"""

from pathlib import Path

from typer.testing import CliRunner

from knowledgenet.cli import app

runner = CliRunner()

PET_DATA = str(Path(__file__).parents[2] / "data" / "pet_data.txt")


def test_parse_rule():
    result = runner.invoke(app, ["parse", "friend(nice, kind) -> @meet(community, people > 2)"])
    assert result.exit_code == 0
    assert "Rule: friend(nice,kind) -> @meet(community,people>2)" in result.output


def test_parse_bare_label():
    result = runner.invoke(app, ["parse", "chair"])
    assert result.exit_code == 0
    assert "Fact: chair()" in result.output


def test_parse_error():
    result = runner.invoke(app, ["parse", "two words"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_show(tmp_path):
    result = runner.invoke(app, ["show", "-k", PET_DATA, "-c", str(tmp_path / "none.toml")])
    assert result.exit_code == 0
    assert "Knowledge nodes (5)" in result.output


def test_forward(tmp_path):
    result = runner.invoke(
        app, ["forward", "husky:10", "banana:10", "-k", PET_DATA, "-c", str(tmp_path / "none.toml")]
    )
    assert result.exit_code == 0
    assert "Input tags (2)" in result.output
    assert "banana()" in result.output
    assert "Active tags (6)" in result.output
    assert "@visitShelter(weekend)" in result.output


def test_backward(tmp_path):
    result = runner.invoke(
        app,
        ["backward", "@visitShelter(weekend)", "-k", PET_DATA, "-c", str(tmp_path / "none.toml"), "--score", "65"],
    )
    assert result.exit_code == 0
    assert "Antecedents (3)" in result.output


def test_forward_rejects_percent_confidence(tmp_path):
    result = runner.invoke(
        app, ["forward", "husky:50", "-k", PET_DATA, "-c", str(tmp_path / "none.toml")]
    )
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_no_knowledge_files(tmp_path):
    result = runner.invoke(app, ["forward", "husky:10", "-c", str(tmp_path / "none.toml")])
    assert result.exit_code == 1
    assert "No knowledge files" in result.output


def test_init_then_forward_uses_config(tmp_path):
    data = tmp_path / "pets.txt"
    data.write_text(Path(PET_DATA).read_text(encoding="utf-8"), encoding="utf-8")

    result = runner.invoke(app, ["init", "--path", str(tmp_path), "-k", "pets.txt", "-n", "pets"])
    assert result.exit_code == 0
    assert (tmp_path / "knowledgenet.toml").exists()

    result = runner.invoke(app, ["forward", "dog:10", "-c", str(tmp_path / "knowledgenet.toml")])
    assert result.exit_code == 0
    assert "animal(multicellular,vertebrate,invertebrate)" in result.output

    result = runner.invoke(app, ["init", "--path", str(tmp_path)])
    assert result.exit_code == 1

"""
Tests for the command-line interface.
"""

import json

import pytest

from ..cli import main

HEADER = "id;name;type;text;freeAction;scanSector;revenue;cost;gain;constraint"


class TestCLI:
    """Tests for seti commands."""

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])

        assert exc.value.code == 1
        assert "parse-effect" in capsys.readouterr().out

    def test_parse_effect(self, capsys):
        main(["parse-effect", "GAIN_ON_ORBIT:media:2"])

        output = json.loads(capsys.readouterr().out)
        assert output["misses"] == []
        assert output["effects"][0]["type"] == "GAIN_ON_ORBIT"

    def test_parse_effect_miss(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["parse-effect", "NOT_A_CODE:1"])

        assert exc.value.code == 1
        assert json.loads(capsys.readouterr().out)["misses"] == ["NOT_A_CODE:1"]

    def test_load_cards(self, tmp_path, capsys):
        path = tmp_path / "cards.csv"
        path.write_text(
            HEADER + "\n"
            "110;Conférence de Presse;Action;Gagnez 3 Médias.;1 Donnée;Rouge;1 Crédit;1 Crédit;3 Médias;\n",
            encoding="utf-8",
        )

        main(["load-cards", str(path)])

        assert capsys.readouterr().out.strip() == "Cards: 1"

    def test_load_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["load-cards", str(tmp_path / "missing.csv")])

        assert capsys.readouterr().out.startswith("Error:")

    def test_new_game(self, capsys):
        main(["new-game", "Alice", "Bob", "--seed", "9"])

        output = capsys.readouterr().out
        assert "Game: game_9 (seed 9)" in output
        assert "First player: Alice" in output

    def test_new_game_bad_count(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["new-game", "Alice"])

        assert exc.value.code == 1
        assert "Nombre de joueurs invalide" in capsys.readouterr().out

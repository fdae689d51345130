"""
Tests for card text parsing and card file ingestion.

Tests:
- Immediate, passive and permanent grammars
- Misses for unrecognized fragments
- Card rows, header handling and degraded values
- The built-in deck
"""

import logging

import pytest

from ..content import BUILTIN_CARDS_CSV, builtin_cards
from ..effects import (
    CardEffect,
    EffectType,
    parse_constraints,
    parse_effect_code,
    parse_immediate,
    parse_passive,
    parse_permanent,
)
from ..effects.card_loader import CardLoadError, load_cards, parse_cards
from ..effects.catalog import trigger_amount
from ..engine_core.enums import CardType, CostType, FreeActionType, RevenueType, SectorType, TechnologyCategory


class TestImmediateGrammar:
    """Tests for free-form gain text."""

    def test_resources(self):
        """Resource fragments become GAIN effects."""
        result = parse_immediate("2 Données + 1 Média")

        assert result.misses == []
        assert result.effects == [
            CardEffect(EffectType.GAIN, 2, "DATA"),
            CardEffect(EffectType.GAIN, 1, "MEDIA"),
        ]

    def test_scoped_signal(self):
        """Signal fragments carry their sector scope."""
        result = parse_immediate("2 Signaux Bleu")

        effect = result.effects[0]
        assert effect.type == EffectType.ACTION
        assert effect.target == "SIGNAL"
        assert effect.value == {"amount": 2, "scope": SectorType.BLUE}

    def test_tech_scope(self):
        """Tech fragments carry their category."""
        effect = parse_immediate("1 Tech Informatique").effects[0]

        assert effect.target == "TECH"
        assert effect.to_dict()["value"] == {"amount": 1, "scope": "Informatique"}

    def test_exploration_or_observation_scope(self):
        effect = parse_immediate("1 Tech exploorobs").effects[0]

        assert effect.value == {"amount": 1, "scope": TechnologyCategory.EXPLORATION_OR_OBSERVATION}

    def test_missing_amount_defaults_to_one(self):
        """A fragment without a number counts once."""
        effect = parse_immediate("Rotation").effects[0]

        assert effect.value == 1
        assert effect.target == "ROTATION"

    def test_unknown_fragment_is_a_miss(self, caplog):
        """Unrecognized text is reported and logged, not raised."""
        with caplog.at_level(logging.WARNING):
            result = parse_immediate("1 Licorne + 1 Média")

        assert len(result.effects) == 1
        assert result.misses == [CardEffect(EffectType.UNKNOWN, "1 Licorne", "immediate")]
        assert "1 Licorne" in caplog.text

    def test_empty_text(self):
        """Empty or missing text parses to nothing."""
        assert parse_immediate("").effects == []
        assert parse_immediate(None).misses == []


class TestStrictGrammars:
    """Tests for passive and permanent codes."""

    def test_permanent_trigger(self):
        """A trigger keeps its raw code as value and the reward as target."""
        result = parse_permanent("GAIN_ON_ORBIT:media:2")

        assert result.effects == [CardEffect(EffectType.GAIN_ON_ORBIT, "GAIN_ON_ORBIT:media:2", "media")]
        assert trigger_amount(result.effects[0]) == 2

    def test_four_part_trigger(self):
        """Qualified triggers pick the effect type from the qualifier."""
        effect = parse_permanent("GAIN_ON_SIGNAL:yellow:data:1").effects[0]

        assert effect.type == EffectType.GAIN_ON_YELLOW_SIGNAL
        assert effect.target == "data"

    def test_unknown_qualifier_is_a_miss(self):
        result = parse_permanent("GAIN_ON_SIGNAL:purple:data:1")

        assert result.effects == []
        assert len(result.misses) == 1

    def test_conditional_requirement(self):
        """GAIN_IF codes name the condition as target."""
        effect = parse_permanent("GAIN_IF_MEDIA:8:pv:4").effects[0]

        assert effect.type == EffectType.GAIN_IF
        assert effect.target == "MEDIA"

    def test_passive_codes(self):
        """Passive codes parse their integer fields."""
        result = parse_passive("VISIT_PLANET:mars:4 + SCORE_PER_MEDIA:1 + NO_DATA")

        assert [e.type for e in result.effects] == [
            EffectType.VISIT_BONUS, EffectType.SCORE_PER_MEDIA, EffectType.NO_DATA,
        ]
        assert result.effects[0].value == 4
        assert result.effects[0].target == "mars"

    def test_passive_wrong_field_count(self):
        """A code with the wrong number of fields is a miss."""
        result = parse_passive("SCORE_PER_SECTOR:red")

        assert result.effects == []
        assert result.misses[0].value == "SCORE_PER_SECTOR:red"

    def test_constraints_split_by_grammar(self):
        """A constraint column mixes passive and permanent codes."""
        passive, permanent, misses = parse_constraints("ANY_PROBE + GAIN_ON_LAUNCH:media:1 + BOGUS")

        assert [e.type for e in passive.effects] == [EffectType.ANY_PROBE]
        assert [e.type for e in permanent.effects] == [EffectType.GAIN_ON_LAUNCH]
        assert [m.value for m in misses] == ["BOGUS"]


class TestParseEffectCode:
    """Tests for grammar auto-detection."""

    def test_code(self):
        result = parse_effect_code("GAIN_ON_ORBIT:media:2")

        assert result.misses == []
        assert result.effects == [CardEffect(EffectType.GAIN_ON_ORBIT, "GAIN_ON_ORBIT:media:2", "media")]

    def test_text(self):
        result = parse_effect_code("2 Données + 1 Média")

        assert [(e.type, e.value, e.target) for e in result.effects] == [
            (EffectType.GAIN, 2, "DATA"),
            (EffectType.GAIN, 1, "MEDIA"),
        ]

    def test_mixed(self):
        """Codes and text can be joined in one string."""
        result = parse_effect_code("1 Média + NO_DATA")

        assert [e.type for e in result.effects] == [EffectType.GAIN, EffectType.NO_DATA]

    def test_never_raises(self):
        """Garbage is reported as misses."""
        result = parse_effect_code("NOT_A_CODE:1 + ???")

        assert result.effects == []
        assert len(result.misses) == 2


class TestCardLoader:
    """Tests for ';'-separated card files."""

    HEADER = "id;name;type;text;freeAction;scanSector;revenue;cost;gain;constraint"

    def test_parse_row(self):
        """All columns map onto the card template."""
        content = "\n".join([
            self.HEADER,
            "214;Programme de Lancement;Mission Déclenchable;Texte;1 Média;Bleu;1 Crédit;1 Crédit;;"
            "GAIN_ON_LAUNCH:media:1",
        ])

        report = parse_cards(content)

        card = report.cards[0]
        assert card.id == "214"
        assert card.type == CardType.TRIGGERED_MISSION
        assert card.free_action == FreeActionType.MEDIA
        assert card.scan_sector == SectorType.BLUE
        assert card.revenue == RevenueType.CREDIT
        assert (card.cost, card.cost_type) == (1, CostType.CREDIT)
        assert card.permanent_effects[0].type == EffectType.GAIN_ON_LAUNCH
        assert report.misses == {}

    def test_energy_cost(self):
        report = parse_cards("X;Carte;Action;;;;;2 Energie;1 Média;")

        assert (report.cards[0].cost, report.cards[0].cost_type) == (2, CostType.ENERGY)

    def test_no_header(self):
        """Files without a header row keep their first card."""
        report = parse_cards("110;Conférence de Presse;Action;;;;;1 Crédit;3 Médias;")

        assert [c.id for c in report.cards] == ["110"]

    def test_row_without_id_is_skipped(self):
        """Rows without an id are skipped and reported by line number."""
        content = "\n".join([
            self.HEADER,
            "1;Carte A;Action;;;;;1 Crédit;1 Média;",
            ";Sans id;Action;;;;;1 Crédit;1 Média;",
            "",
            "2;Carte B;Action;;;;;1 Crédit;1 Média;",
        ])

        report = parse_cards(content)

        assert [c.id for c in report.cards] == ["1", "2"]
        assert report.skipped_rows == [3]

    def test_degraded_values(self):
        """Unknown enum values degrade to UNDEFINED; unknown effects are misses."""
        report = parse_cards("X1;Carte Test;Bizarre;texte;;Violet;;abc;1 Licorne;")

        card = report.cards[0]
        assert card.type == CardType.UNDEFINED
        assert card.scan_sector == SectorType.UNDEFINED
        assert card.revenue == RevenueType.UNDEFINED
        assert card.cost == 0
        assert [m.value for m in report.misses["X1"]] == ["1 Licorne"]

    def test_short_rows_are_padded(self):
        report = parse_cards("7;Carte courte;Action")

        assert report.cards[0].name == "Carte courte"
        assert report.cards[0].immediate_effects == ()

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "cards.csv"
        path.write_text(self.HEADER + "\n137;Archives;Action;;;;;1 Crédit;2 Données;\n", encoding="utf-8")

        report = load_cards(path)

        assert [c.name for c in report.cards] == ["Archives"]

    def test_unreadable_file(self, tmp_path):
        """Only a missing or unreadable file raises."""
        with pytest.raises(CardLoadError):
            load_cards(tmp_path / "missing.csv")


class TestBuiltinDeck:
    """Tests for the built-in action deck."""

    def test_parses_cleanly(self):
        report = parse_cards(BUILTIN_CARDS_CSV)

        assert len(report.cards) == 67
        assert report.misses == {}
        assert report.skipped_rows == []

    def test_unique_ids(self):
        cards = builtin_cards()

        assert len({c.id for c in cards}) == len(cards)

    def test_card_kinds(self, cards_by_id):
        """The deck holds actions, both mission kinds and end-game cards."""
        kinds = {c.type for c in cards_by_id.values()}

        assert kinds == {
            CardType.ACTION, CardType.CONDITIONAL_MISSION,
            CardType.TRIGGERED_MISSION, CardType.END_GAME,
        }
        assert cards_by_id["222"].passive_effects[0].type == EffectType.SCORE_PER_SECTOR

"""
Tests for bonuses and the bonus resolver.

Tests:
- Bonus arithmetic and formatting
- Scalar gains with resource caps
- Interactions spawned by choosable gains
- Wrapping of several choosable gains
"""

import pytest

from ..effects import parse_immediate
from ..engine_core.bonus import Bonus, bonus_for_target, format_bonus, format_resource
from ..engine_core.bonus_resolver import BonusContext, BonusResolver
from ..engine_core.interaction import (
    AcquiringCard,
    ChoosingBonusAction,
    InteractionType,
    ReservingCard,
)


class TestBonus:
    """Tests for the Bonus value."""

    def test_empty(self):
        assert Bonus().is_empty()
        assert Bonus(source_card_id="110").is_empty()
        assert not Bonus(media=1).is_empty()

    def test_merge_adds_numbers_and_ors_flags(self):
        merged = Bonus(media=1, no_data=True).merge(Bonus(media=2, card=1))

        assert merged.media == 3
        assert merged.card == 1
        assert merged.no_data

    def test_merge_none_copies(self):
        bonus = Bonus(pv=2)
        copy = bonus.merge(None)

        assert copy == bonus
        assert copy is not bonus

    def test_from_effects(self):
        """Immediate effects convert field by field."""
        bonus = Bonus.from_effects(parse_immediate("2 Données + 1 Média + 1 Rotation").effects)

        assert bonus == Bonus(data=2, media=1, rotation=1)

    def test_bonus_for_target(self):
        assert bonus_for_target("media", 2) == Bonus(media=2)
        assert bonus_for_target("PV", 3) == Bonus(pv=3)
        assert bonus_for_target("move", 1) == Bonus(movements=1)
        assert bonus_for_target("unknown", 5).is_empty()

    def test_format_resource(self):
        """Labels are pluralized above one."""
        assert format_resource(1, "media") == "1 Média"
        assert format_resource(2, "media") == "2 Médias"
        assert format_resource(3, "pv") == "3 PV"

    def test_format_bonus(self):
        assert format_bonus(Bonus(pv=2, media=1)) == "2 PV, 1 Média"
        assert format_bonus(None) == ""

    def test_to_dict_skips_empty_fields(self):
        assert Bonus(credits=2).to_dict() == {"credits": 2}


class TestBonusResolver:
    """Tests for BonusResolver.resolve."""

    @pytest.fixture
    def resolver(self):
        return BonusResolver()

    def test_empty_bonus_is_a_no_op(self, resolver, game):
        resolution = resolver.resolve(Bonus(), game, "player_0")

        assert resolution.game is game
        assert resolution.history_entries == []
        assert resolution.interactions == []

    def test_unknown_player(self, resolver, game):
        with pytest.raises(ValueError):
            resolver.resolve(Bonus(pv=1), game, "player_9")

    def test_scalars(self, resolver, game):
        resolution = resolver.resolve(Bonus(pv=2, credits=1, energy=1), game, "player_0", BonusContext("seq_1"))

        player = resolution.game.get_player("player_0")
        assert player.score == 3
        assert player.credits == 5
        assert player.energy == 4
        entry = resolution.history_entries[-1]
        assert entry.message == "gagne 2 PV, 1 Crédit, 1 Énergie"
        assert entry.sequence_id == "seq_1"

    def test_media_capped_and_card_queued(self, resolver, game):
        """Media stops at 10; a card gain waits for the player's pick."""
        game.get_player("player_0").media = 9

        resolution = resolver.resolve(Bonus(media=2, card=1), game, "player_0")

        assert resolution.game.get_player("player_0").media == 10
        assert resolution.interactions == [AcquiringCard(count=1)]

    def test_data_capped(self, resolver, game):
        game.get_player("player_0").data = 5

        resolution = resolver.resolve(Bonus(data=3), game, "player_0")

        assert resolution.game.get_player("player_0").data == 6
        assert any("ne peut pas stocker" in e.message for e in resolution.history_entries)

    def test_input_not_mutated(self, resolver, game):
        before = game.get_player("player_0").media

        resolver.resolve(Bonus(media=3), game, "player_0")

        assert game.get_player("player_0").media == before

    def test_reservation_bounded_by_hand(self, resolver, game):
        game.get_player("player_0").hand = game.get_player("player_0").hand[:1]

        resolution = resolver.resolve(Bonus(reservation=3), game, "player_0")

        assert resolution.interactions == [ReservingCard(count=1)]

    def test_reservation_with_empty_hand(self, resolver, game):
        game.get_player("player_0").hand = []

        resolution = resolver.resolve(Bonus(reservation=1), game, "player_0")

        assert resolution.interactions == []
        assert resolution.history_entries[-1].message == "n'a aucune carte à réserver"

    def test_several_choices_are_wrapped(self, resolver, game):
        """Two choosable gains become one CHOOSING_BONUS_ACTION."""
        resolution = resolver.resolve(Bonus(card=1, reservation=1), game, "player_0", BonusContext("seq_3"))

        assert len(resolution.interactions) == 1
        wrapper = resolution.interactions[0]
        assert isinstance(wrapper, ChoosingBonusAction)
        assert wrapper.sequence_id == "seq_3"
        assert [c.id for c in wrapper.choices] == ["choice_0", "choice_1"]
        assert [c.label for c in wrapper.choices] == ["Prendre une carte", "Réserver une carte"]
        assert [c.state.type for c in wrapper.choices] == [
            InteractionType.ACQUIRING_CARD, InteractionType.RESERVING_CARD,
        ]
        assert not any(c.done for c in wrapper.choices)

    def test_free_card_pick(self, resolver, game):
        resolution = resolver.resolve(Bonus(anycard=1), game, "player_0")

        assert resolution.interactions == [AcquiringCard(count=1, is_free=True)]

    def test_card_pick_with_no_card_left(self, resolver, game):
        """An exhausted deck grants nothing instead of a pick nobody can make."""
        game.decks.cards.clear()
        game.decks.discard_pile.clear()

        resolution = resolver.resolve(Bonus(card=1), game, "player_0")

        assert resolution.interactions == []
        assert resolution.history_entries[-1].message == "ne peut piocher aucune carte (pioche vide)"

    def test_card_pick_bounded_by_deck_and_discard(self, resolver, game):
        game.decks.discard_pile = game.decks.cards[1:2]
        game.decks.cards = game.decks.cards[:1]

        resolution = resolver.resolve(Bonus(card=3), game, "player_0")

        assert resolution.interactions == [AcquiringCard(count=2)]

"""
Tests for the interaction queue and the interaction resolver.

Tests:
- Queue ordering (push, push_all, enqueue) and snapshots
- Choice parsing
- Ownership and decline rules
- Bonus wrapper picking
- Card acquisition and reservation
- Scan sector picks that chain several signals
"""

import pytest

from ..engine_core.interaction import (
    IDLE,
    AcquiringCard,
    AcquiringTech,
    BonusChoice,
    ChoosingBonusAction,
    ChoosingMediaOrMove,
    InteractionQueue,
    InteractionType,
    PlacingObjectiveMarker,
    ReservingCard,
    SelectingScanSector,
)
from ..engine_core.interaction_resolver import Choice, InteractionError


class TestInteractionQueue:
    """Tests for InteractionQueue."""

    def test_empty_queue_is_idle(self):
        queue = InteractionQueue()

        assert queue.is_idle()
        assert queue.current is IDLE
        assert queue.current.type == InteractionType.IDLE
        assert len(queue) == 0

    def test_push_puts_in_front(self):
        queue = InteractionQueue()
        queue.push(AcquiringCard())
        queue.push(ReservingCard())

        assert queue.current.type == InteractionType.RESERVING_CARD
        assert len(queue) == 2

    def test_push_all_keeps_batch_order(self):
        """A pushed batch goes in front of older states, first state current."""
        queue = InteractionQueue()
        queue.push(AcquiringTech())
        queue.push_all([AcquiringCard(), ReservingCard()])

        assert [s.type for s in queue.pending()] == [
            InteractionType.ACQUIRING_CARD,
            InteractionType.RESERVING_CARD,
            InteractionType.ACQUIRING_TECH,
        ]

    def test_enqueue_appends(self):
        queue = InteractionQueue()
        queue.push(AcquiringCard())
        queue.enqueue(ReservingCard())

        assert queue.current.type == InteractionType.ACQUIRING_CARD
        assert queue.pending()[-1].type == InteractionType.RESERVING_CARD

    def test_idle_is_never_stored(self):
        queue = InteractionQueue()
        queue.push(IDLE)
        queue.enqueue(IDLE)
        queue.push_all([IDLE])

        assert queue.is_idle()

    def test_pop_and_replace_on_empty_queue(self):
        queue = InteractionQueue()

        with pytest.raises(ValueError):
            queue.pop()
        with pytest.raises(ValueError):
            queue.replace_current(AcquiringCard())

    def test_snapshot_restore(self):
        queue = InteractionQueue()
        queue.push(AcquiringCard())
        snapshot = queue.snapshot()

        queue.pop()
        queue.restore(snapshot)

        assert queue.current == AcquiringCard()

    def test_to_dict(self):
        state = AcquiringCard(sequence_id="seq_2", count=2)

        assert state.to_dict() == {
            "type": "ACQUIRING_CARD",
            "sequence_id": "seq_2",
            "count": 2,
            "is_free": False,
            "trigger_free_action": False,
        }


class TestChoice:
    """Tests for Choice.from_dict."""

    def test_camel_case(self):
        choice = Choice.from_dict({"cardIds": ["110"], "targetId": "deck", "decline": True})

        assert choice.card_ids == ["110"]
        assert choice.target_id == "deck"
        assert choice.decline

    def test_snake_case(self):
        choice = Choice.from_dict({"card_ids": ["1", "2"], "target_id": "t", "params": {"index": 1}})

        assert choice.card_ids == ["1", "2"]
        assert choice.params == {"index": 1}
        assert not choice.decline


class TestInteractionResolver:
    """Tests for answering interactions through the engine."""

    def test_nothing_pending(self, engine):
        with pytest.raises(InteractionError, match="Aucune interaction en attente"):
            engine.resolve(Choice())

    def test_acquire_from_deck(self, engine):
        engine.queue.push(AcquiringCard(sequence_id="seq_1"))
        hand_size = len(engine.game.get_player("player_0").hand)
        top = engine.game.decks.cards[0]

        result = engine.resolve(Choice())

        assert result.success
        assert len(engine.game.get_player("player_0").hand) == hand_size + 1
        assert result.history_entries[0].message == f"prend \"{top.name}\" de la pioche"
        assert result.history_entries[0].sequence_id == "seq_1"
        assert engine.queue.is_idle()

    def test_acquire_several_cards(self, engine):
        """A multi-card pick stays current until its count is used up."""
        engine.queue.push(AcquiringCard(count=2))

        engine.resolve(Choice())

        assert engine.pending_interaction == AcquiringCard(count=1)

    def test_row_pick_needs_a_free_gain(self, engine):
        """A refused choice leaves the game and the queue untouched."""
        engine.queue.push(AcquiringCard())
        row_card = engine.game.decks.card_row[0]
        before = engine.game

        with pytest.raises(InteractionError, match="pioche"):
            engine.resolve(Choice(target_id=row_card.id))

        assert engine.pending_interaction.type == InteractionType.ACQUIRING_CARD
        assert engine.game is not before
        assert len(engine.game.get_player("player_0").hand) == len(before.get_player("player_0").hand)
        assert len(engine.ledger) == 0

    def test_free_row_pick(self, engine):
        engine.queue.push(AcquiringCard(is_free=True))
        row_card = engine.game.decks.card_row[0]

        result = engine.resolve(Choice(target_id=row_card.id))

        assert row_card in engine.game.get_player("player_0").hand
        assert len(engine.game.decks.card_row) == 3
        assert result.history_entries[0].message == f"prend \"{row_card.name}\" de la rangée"

    def test_decline_not_allowed(self, engine):
        engine.queue.push(AcquiringCard())

        with pytest.raises(InteractionError):
            engine.resolve(Choice(decline=True))

    def test_decline_when_no_card_is_left(self, engine):
        engine.game.decks.cards.clear()
        engine.game.decks.discard_pile.clear()
        engine.queue.push(AcquiringCard())

        result = engine.resolve(Choice(decline=True))

        assert result.success
        assert engine.queue.is_idle()
        assert any(e.message == "ne peut piocher aucune carte (pioche vide)" for e in result.history_entries)

    def test_pick_stops_when_cards_run_out(self, engine):
        """A multi-card pick ends with the last card of the deck."""
        engine.game.decks.cards[1:] = []
        engine.game.decks.discard_pile.clear()
        engine.queue.push(AcquiringCard(count=2))

        engine.resolve(Choice())

        assert engine.queue.is_idle()

    def test_decline_allowed(self, engine):
        engine.queue.push(ChoosingMediaOrMove())

        engine.resolve(Choice(decline=True))

        assert engine.queue.is_idle()

    def test_media_option(self, engine):
        engine.queue.push(ChoosingMediaOrMove())
        media = engine.game.get_player("player_0").media

        engine.resolve(Choice(option="media"))

        assert engine.game.get_player("player_0").media == media + 1

    def test_move_option_queues_a_movement(self, engine):
        engine.queue.push(ChoosingMediaOrMove())

        engine.resolve(Choice(option="move"))

        assert engine.pending_interaction.type == InteractionType.MOVING_PROBE

    def test_owner_mismatch(self, engine):
        """Only the named player may answer their own prompt."""
        engine.queue.push(PlacingObjectiveMarker(milestone=25, player_id="player_1"))

        with pytest.raises(InteractionError, match="player_1"):
            engine.resolve(Choice(target_id=engine.game.board.objective_tiles[0].id), "player_0")

    def test_place_objective_marker(self, engine):
        tile = engine.game.board.objective_tiles[0]
        engine.queue.push(PlacingObjectiveMarker(milestone=25, player_id="player_1"))

        engine.resolve(Choice(target_id=tile.id), "player_1")

        placed = next(t for t in engine.game.board.objective_tiles if t.id == tile.id)
        assert placed.markers == ["player_1"]
        assert engine.queue.is_idle()

    def test_reserve_card(self, engine):
        engine.queue.push(ReservingCard(count=1))
        card = engine.game.get_player("player_0").hand[0]

        engine.resolve(Choice(card_ids=[card.id]))

        player = engine.game.get_player("player_0")
        assert card in player.reserved_cards
        assert card not in player.hand
        assert engine.queue.is_idle()

    def test_reserve_needs_a_card(self, engine):
        engine.queue.push(ReservingCard(count=1))

        with pytest.raises(InteractionError, match="Aucune carte"):
            engine.resolve(Choice())


class TestBonusWrapper:
    """Tests for CHOOSING_BONUS_ACTION."""

    @pytest.fixture
    def wrapper(self):
        return ChoosingBonusAction(
            sequence_id="seq_1",
            bonuses_summary="1 Carte, 1 Réservation",
            choices=(
                BonusChoice("choice_0", "Prendre une carte", AcquiringCard()),
                BonusChoice("choice_1", "Réserver une carte", ReservingCard()),
            ),
        )

    def test_pick_by_id(self, engine, wrapper):
        """The picked state goes in front; the wrapper stays with it marked done."""
        engine.queue.push(wrapper)

        engine.resolve(Choice(target_id="choice_1"))

        pending = engine.queue.pending()
        assert pending[0].type == InteractionType.RESERVING_CARD
        assert pending[1].type == InteractionType.CHOOSING_BONUS_ACTION
        assert [c.done for c in pending[1].choices] == [False, True]

    def test_pick_twice(self, engine, wrapper):
        engine.queue.push(wrapper)
        engine.resolve(Choice(target_id="choice_1"))
        engine.resolve(Choice(card_ids=[engine.game.get_player("player_0").hand[0].id]))

        with pytest.raises(InteractionError, match="déjà été résolu"):
            engine.resolve(Choice(target_id="choice_1"))

    def test_last_pick_removes_wrapper(self, engine, wrapper):
        engine.queue.push(wrapper)
        engine.resolve(Choice(target_id="choice_1"))
        engine.resolve(Choice(card_ids=[engine.game.get_player("player_0").hand[0].id]))

        engine.resolve(Choice(params={"index": 0}))

        assert [s.type for s in engine.queue.pending()] == [InteractionType.ACQUIRING_CARD]

    def test_unknown_choice(self, engine, wrapper):
        engine.queue.push(wrapper)

        with pytest.raises(InteractionError, match="Choix invalide"):
            engine.resolve(Choice(target_id="choice_9"))


class TestScanSectorPick:
    """Tests for SELECTING_SCAN_SECTOR picks that mark more than one signal."""

    def test_mark_adjacents_keeps_every_gain(self, engine):
        """Each marked data signal pays its data."""
        engine.game.get_player("player_0").data = 0
        engine.queue.push(SelectingScanSector(mark_adjacents=True))

        engine.resolve(Choice(target_id="sector_1"))

        game = engine.game
        assert game.get_player("player_0").data == 3
        for sector_id in ["sector_1", "sector_2", "sector_8"]:
            assert game.board.get_sector(sector_id).marked_by("player_0") == 1

    def test_keep_card_if_only_signal(self, engine):
        """The source card comes back and the signal still pays."""
        player = engine.game.get_player("player_0")
        player.data = 0
        card = player.hand.pop(0)
        engine.game.decks.discard_pile.append(card)
        engine.queue.push(SelectingScanSector(keep_card_if_only=True, card_id=card.id))

        result = engine.resolve(Choice(target_id="sector_3"))

        player = engine.game.get_player("player_0")
        assert card in player.hand
        assert card not in engine.game.decks.discard_pile
        assert player.data == 1
        assert any(e.message == f"récupère la carte \"{card.name}\" en main" for e in result.history_entries)

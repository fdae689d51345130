"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to game loop calls
2. Manages sessions
3. Formats game state for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    ActionRequest,
    ChoiceRequest,
    CreateSessionRequest,
    EndTurnRequest,
    # Responses
    ErrorResponse,
    GameStateResponse,
    LegalActionsResponse,
    SessionResponse,
    TurnResponse,
    # Shared
    CardInfo,
    HistoryEntryInfo,
    MissionInfo,
    PlanetInfo,
    PlayerInfo,
    ProbeInfo,
    SectorInfo,
    TechnologyInfo,
    # Enums
    ErrorCode,
    LoopStatus,
    SessionStatus,
)
from ..engine_core.state import Card, Game, Player
from ..session import GameLoop, Session, SessionManager, TurnResult

logger = logging.getLogger(__name__)

# Loop error codes with their own API code; anything else is a rule refusal
_LOOP_ERROR_CODES = {
    "INVALID_ACTION": ErrorCode.INVALID_ACTION,
    "INVALID_CHOICE": ErrorCode.INVALID_CHOICE,
    "NOTHING_TO_UNDO": ErrorCode.NOTHING_TO_UNDO,
}


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create session
        session_response = service.create_session(request)

        # Play
        service.perform_action(session_id, ActionRequest(type="LAUNCH_PROBE", player_id="player_0"))
        service.resolve_interaction(session_id, ChoiceRequest(target_id="..."))
        service.end_turn(session_id, EndTurnRequest())
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """
        Create a new game session with a freshly set up game.
        """
        try:
            session = self.session_manager.create_session(request.player_names, seed=request.seed)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)
        self._game_loops[session.session_id] = GameLoop(session)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """
        Get session status.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """
        Get current game state.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._build_game_state(session_id, session)

    def legal_actions(self, session_id: str) -> LegalActionsResponse | ErrorResponse:
        game_loop = self._loop(session_id)
        if game_loop is None:
            return self._not_found(session_id)
        actions = game_loop.legal_actions()
        return LegalActionsResponse(
            session_id=session_id,
            current_player_id=game_loop.engine.game.current_player.id,
            actions=actions,
            count=len(actions),
        )

    def perform_action(self, session_id: str, request: ActionRequest) -> TurnResponse | ErrorResponse:
        """
        Perform a main or free action for a player.
        """
        game_loop = self._loop(session_id)
        if game_loop is None:
            return self._not_found(session_id)
        result = game_loop.submit_action(request.type, request.player_id, request.params)
        return self._turn_result_to_response(session_id, result)

    def resolve_interaction(self, session_id: str, request: ChoiceRequest) -> TurnResponse | ErrorResponse:
        """
        Answer the interaction at the front of the queue.
        """
        game_loop = self._loop(session_id)
        if game_loop is None:
            return self._not_found(session_id)
        choice = request.model_dump(exclude={"player_id"})
        result = game_loop.submit_choice(choice, request.player_id)
        return self._turn_result_to_response(session_id, result)

    def end_turn(self, session_id: str, request: EndTurnRequest | None = None) -> TurnResponse | ErrorResponse:
        game_loop = self._loop(session_id)
        if game_loop is None:
            return self._not_found(session_id)
        result = game_loop.end_turn(request.player_id if request else None)
        return self._turn_result_to_response(session_id, result)

    def undo(self, session_id: str) -> TurnResponse | ErrorResponse:
        game_loop = self._loop(session_id)
        if game_loop is None:
            return self._not_found(session_id)
        return self._turn_result_to_response(session_id, game_loop.undo())

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """
        End a game session.
        """
        ended = self.session_manager.end_session(session_id, reason)
        self._game_loops.pop(session_id, None)
        return ended is not None

    def list_sessions(self) -> list[str]:
        """List active session IDs."""
        return self.session_manager.list_active_sessions()

    def cleanup(self) -> list[str]:
        """Reap stale sessions and their loops."""
        removed = self.session_manager.cleanup_stale_sessions()
        for session_id in removed:
            self._game_loops.pop(session_id, None)
        return removed

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _loop(self, session_id: str) -> GameLoop | None:
        session = self.session_manager.get_session(session_id)
        if not session:
            return None
        if session_id not in self._game_loops:
            self._game_loops[session_id] = GameLoop(session)
        return self._game_loops[session_id]

    @staticmethod
    def _not_found(session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        """Convert Session to SessionResponse."""
        game = session.game
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            game_id=game.id,
            players=[self._player_info(game, p, with_hand=False) for p in game.players],
            current_player_id=game.current_player.id,
            round=game.current_round,
            phase=game.phase.value,
            created_at=session.created_at,
        )

    def _turn_result_to_response(self, session_id: str, result: TurnResult) -> TurnResponse | ErrorResponse:
        if not result.success:
            error_code = _LOOP_ERROR_CODES.get(result.error_code, ErrorCode.ACTION_REJECTED)
            details = {"errors": result.errors, "loop_state": result.loop_state.value}
            if error_code == ErrorCode.ACTION_REJECTED:
                details["rule_code"] = result.error_code
            return ErrorResponse(
                error=result.errors[0] if result.errors else "Requête refusée",
                error_code=error_code,
                details=details,
            )
        return TurnResponse(
            session_id=session_id,
            success=True,
            loop_state=LoopStatus(result.loop_state.value),
            history=[self._history_info(entry) for entry in result.history],
            pending_interaction=result.pending_interaction,
            current_player_id=result.current_player_id,
            winners=result.winners,
        )

    def _build_game_state(self, session_id: str, session: Session) -> GameStateResponse:
        """Build the full state view of a session's game."""
        game = session.game
        game_loop = self._loop(session_id)
        board = game.board
        return GameStateResponse(
            session_id=session_id,
            status=SessionStatus(session.state.value),
            loop_state=LoopStatus(game_loop.state.value),
            game_id=game.id,
            phase=game.phase.value,
            round=game.current_round,
            max_rounds=game.max_rounds,
            current_player_id=game.current_player.id,
            first_player_id=game.players[game.first_player_index].id,
            players=[self._player_info(game, p) for p in game.players],
            card_row=[self._card_info(c) for c in game.decks.card_row],
            deck_size=len(game.decks.cards),
            sectors=[
                SectorInfo(
                    id=s.id,
                    name=s.name,
                    color=s.color.value,
                    signals_total=len(s.signals),
                    signals_marked=sum(1 for sig in s.signals if sig.marked),
                    player_markers=list(s.player_markers),
                    is_covered=s.is_covered,
                )
                for s in board.sectors
            ],
            planets=[
                PlanetInfo(id=p.id, name=p.name, orbiters=list(p.orbiters), landers=list(p.landers))
                for p in board.planets
            ],
            technologies=[
                TechnologyInfo(id=stack[0].id, name=stack[0].name,
                               category=stack[0].category.value, remaining=len(stack))
                for stack in board.technology_board.stacks.values() if stack
            ],
            solar_system_rotation=list(board.solar_system.rotation),
            pending_interaction=None if game_loop.engine.queue.is_idle()
            else game_loop.engine.pending_interaction.to_dict(),
            history=[self._history_info(entry.to_dict()) for entry in game.history],
            winners=game_loop.engine.winners(),
            final_scores=game.final_scores,
        )

    def _player_info(self, game: Game, player: Player, with_hand: bool = True) -> PlayerInfo:
        return PlayerInfo(
            player_id=player.id,
            name=player.name,
            color=player.color,
            score=player.score,
            credits=player.credits,
            energy=player.energy,
            data=player.data,
            media=player.media,
            tokens=player.tokens,
            revenue={
                "credits": player.revenue_credits,
                "energy": player.revenue_energy,
                "cards": player.revenue_cards,
            },
            hand=[self._card_info(c) for c in player.hand] if with_hand else [],
            hand_count=len(player.hand),
            reserved_cards=[self._card_info(c) for c in player.reserved_cards] if with_hand else [],
            probes=[
                ProbeInfo(id=p.id, state=p.state.value, sector=p.sector, planet_id=p.planet_id)
                for p in player.probes
            ],
            technologies=[t.id for t in player.technologies],
            missions=[
                MissionInfo(
                    id=m.id,
                    name=m.name,
                    completed=m.completed,
                    completed_requirements=list(m.completed_requirement_ids),
                )
                for m in player.missions
            ],
            has_passed=player.has_passed,
            has_performed_main_action=player.has_performed_main_action,
            is_current_turn=player.id == game.current_player.id,
        )

    @staticmethod
    def _card_info(card: Card) -> CardInfo:
        return CardInfo(
            id=card.id,
            name=card.name,
            type=card.type.value,
            cost=card.cost,
            cost_type=card.cost_type.value,
            description=card.description,
        )

    @staticmethod
    def _history_info(entry: dict) -> HistoryEntryInfo:
        return HistoryEntryInfo(
            message=entry["message"],
            player_id=entry["playerId"],
            sequence_id=entry.get("sequenceId", ""),
        )

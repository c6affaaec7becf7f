"""Main game engine for Wingsim.

The GameEngine runs a complete game:
- setup_game(): build the initial state and deal starting resources
- play_game(): starting hands, rounds of turns, final scoring
- apply_effect(): the only path through which game state changes
- process_event(): runs brown, white and pink powers triggered by events

Agents are asked for decisions through the DecisionBroker; handlers are
driven by the ActionProcessor.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from core.board import BirdInstance, make_bird_instance_id
from core.cards import BirdCard
from core.constants import (
    CardSource,
    FoodDestination,
    FoodSource,
    FoodType,
    Phase,
    PowerTrigger,
    FOOD_TYPES,
)
from core.errors import AgentForfeitError, ConfigurationError, EffectApplicationError
from core.game_state import GameState
from core.logging_config import get_logger
from core.player import PlayerState, payment_error
from core.rng import RandomSource, SeededRandom

from .action_processor import ActionProcessor, RunResult
from .config import EngineConfig
from .decisions import DecisionBroker
from .effects import (
    BeginRoundEffect,
    BeginTurnEffect,
    Effect,
    EffectType,
    EndTurnEffect,
    ForfeitPlayerEffect,
    KeepStartingHandEffect,
    RefillBirdfeederEffect,
)
from .events import (
    BirdPlayedEvent,
    Event,
    EventType,
    GameEndedEvent,
    GameStartedEvent,
    HabitatActivatedEvent,
    PlayerForfeitedEvent,
    RoundEndedEvent,
    RoundStartedEvent,
    TurnEndedEvent,
    TurnStartedEvent,
)
from .handlers.turn_actions import action_rewards, eligible_actions
from .observer import GameObserver
from .phase_machine import PhaseMachine
from .power import HandlerContext
from .prompts import StartingHandPrompt, TurnActionPrompt
from .registry import HandlerRegistry, build_default_registry
from .scoring import ScoreBreakdown, determine_winner, score_game

if TYPE_CHECKING:
    from agents.base import PlayerAgent
    from data.loader import CardRegistry

logger = get_logger(__name__)

# Events that may trigger once-between-turns powers
PINK_TRIGGER_EVENTS = frozenset(
    {
        EventType.FOOD_GAINED_FROM_HABITAT_ACTIVATION,
        EventType.EGGS_LAID_FROM_HABITAT_ACTIVATION,
        EventType.PREDATOR_POWER_RESOLVED,
        EventType.BIRD_PLAYED,
    }
)


@dataclass
class GameResult:
    """Outcome of a finished game.

    Attributes:
        winner_id: Highest scoring player still in the game (None if all forfeited).
        scores: Final score per player.
        rounds_played: Rounds that were completed or cut short by forfeits.
        total_turns: Turns taken over the whole game.
        forfeited_players: Players who forfeited, in order.
        breakdowns: Score categories per player.
    """

    winner_id: Optional[str]
    scores: dict[str, int]
    rounds_played: int
    total_turns: int
    forfeited_players: list[str] = field(default_factory=list)
    breakdowns: dict[str, ScoreBreakdown] = field(default_factory=dict)


class GameEngine:
    """Runs one game between a set of agents.

    Usage:
        engine = GameEngine(load_default_content(), [RandomAgent("p1", 1), RandomAgent("p2", 2)], seed=7)
        result = asyncio.run(engine.play_game())

    Args:
        content: Card registry with birds, bonus cards and the player board.
        agents: One agent per seat, in seat (clockwise) order.
        seed: Seed of the game's random source.
        registry: Handler registry (the built-in one when omitted).
        config: Engine configuration.
        observers: Observers notified of every effect and event.
        rng: Random source overriding the seeded one (for tests).
    """

    def __init__(
        self,
        content: CardRegistry,
        agents: Sequence[PlayerAgent],
        seed: int = 0,
        registry: Optional[HandlerRegistry] = None,
        config: Optional[EngineConfig] = None,
        observers: Iterable[GameObserver] = (),
        rng: Optional[RandomSource] = None,
    ):
        self.content = content
        self.agents = list(agents)
        self.seed = seed
        self.registry = registry or build_default_registry()
        self.config = config or EngineConfig.default()
        self.observers = list(observers)
        self.rng = rng or SeededRandom(seed)

        player_ids = [agent.player_id for agent in self.agents]
        if len(set(player_ids)) != len(player_ids):
            raise ConfigurationError(f"Duplicate player ids: {player_ids}")
        self.registry.check_handlers(
            card.power.handler_id for card in content.birds() if card.power is not None
        )

        self.broker = DecisionBroker({agent.player_id: agent for agent in self.agents}, self.config)
        self.processor = ActionProcessor(self)
        self.phase_machine = PhaseMachine()
        self._state: Optional[GameState] = None
        self._forfeited: list[str] = []
        self._seat_cursor = 0
        self._rounds_played = 0
        self._round_open = False
        self._appliers = {
            EffectType.ACTIVATE_POWER: self._apply_activate_power,
            EffectType.GAIN_FOOD: self._apply_gain_food,
            EffectType.DISCARD_FOOD: self._apply_discard_food,
            EffectType.CACHE_FOOD: self._apply_cache_food,
            EffectType.ALL_PLAYERS_GAIN_FOOD: self._apply_all_players_gain_food,
            EffectType.ROLL_DICE: self._apply_roll_dice,
            EffectType.REROLL_BIRDFEEDER: self._apply_reroll_birdfeeder,
            EffectType.REFILL_BIRDFEEDER: self._apply_refill_birdfeeder,
            EffectType.LAY_EGGS: self._apply_lay_eggs,
            EffectType.DISCARD_EGGS: self._apply_discard_eggs,
            EffectType.ALL_PLAYERS_LAY_EGGS: self._apply_all_players_lay_eggs,
            EffectType.DRAW_CARDS: self._apply_draw_cards,
            EffectType.DISCARD_CARDS: self._apply_discard_cards,
            EffectType.TUCK_CARDS: self._apply_tuck_cards,
            EffectType.REVEAL_CARDS: self._apply_reveal_cards,
            EffectType.REVEAL_BONUS_CARDS: self._apply_reveal_bonus_cards,
            EffectType.DRAW_BONUS_CARDS: self._apply_draw_bonus_cards,
            EffectType.ALL_PLAYERS_DRAW_CARDS: self._apply_all_players_draw_cards,
            EffectType.REFILL_BIRD_TRAY: self._apply_refill_bird_tray,
            EffectType.PLAY_BIRD: self._apply_play_bird,
            EffectType.MOVE_BIRD: self._apply_move_bird,
            EffectType.KEEP_STARTING_HAND: self._apply_keep_starting_hand,
            EffectType.BEGIN_ROUND: self._apply_begin_round,
            EffectType.BEGIN_TURN: self._apply_begin_turn,
            EffectType.END_TURN: self._apply_end_turn,
            EffectType.FORFEIT_PLAYER: self._apply_forfeit_player,
        }

    @property
    def state(self) -> GameState:
        """Get the current game state.

        Raises:
            RuntimeError: If the game has not been set up.
        """
        if self._state is None:
            raise RuntimeError("Game not set up. Call setup_game() first.")
        return self._state

    @property
    def phase(self) -> Phase:
        return self.phase_machine.phase

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def setup_game(self, state: Optional[GameState] = None) -> GameState:
        """Build the initial state, or adopt a prepared one.

        A fresh state has the feeder rolled, both decks shuffled, the tray
        filled, and each player dealt bird cards, bonus cards and one food
        of each type. A prepared state (scenario tests) is used as is.
        """
        if state is None:
            state = GameState.create(
                [agent.player_id for agent in self.agents],
                self.content.birds(),
                self.content.bonus_cards(),
                self.rng,
                board_config=self.content.player_board,
            )
            for player in state.players:
                player.hand.extend(state.bird_supply.draw_from_deck(self.config.initial_birds_dealt))
                player.bonus_cards.extend(state.bonus_deck.draw(self.config.initial_bonus_cards_dealt))
                for food in FOOD_TYPES:
                    player.gain_food(food)
        self._state = state
        self.broker.state = state
        self.phase_machine = PhaseMachine()
        self._forfeited = [player.player_id for player in state.players if player.forfeited]
        self._seat_cursor = 0
        self._rounds_played = 0
        self._round_open = False
        logger.info("Game set up for %s (seed %d)", ", ".join(state.player_ids), self.seed)
        return state

    # -------------------------------------------------------------------------
    # Game loop
    # -------------------------------------------------------------------------

    async def play_game(self) -> GameResult:
        """Play a whole game and return the final result."""
        if self._state is None:
            self.setup_game()
        state = self.state

        await self._choose_starting_hands()
        await self.process_event(GameStartedEvent(player_ids=state.player_ids))

        while not self.phase_machine.is_game_over():
            previous = self.phase_machine.phase
            step = self.phase_machine.compute_next_phase(state, self.config)
            self._transition(step.new_phase, step.reason)

            if step.new_phase == Phase.TURN_IN_PROGRESS:
                if previous in (Phase.AWAITING_STARTING_HAND, Phase.ROUND_ENDED):
                    await self._begin_round(state.round + 1)
                await self._play_turn(self._next_player())
            elif step.new_phase == Phase.ROUND_ENDED:
                await self._end_round()
            elif step.new_phase == Phase.GAME_ENDED and self._round_open:
                await self._end_round()

        return await self._finish()

    def _transition(self, phase: Phase, reason: Optional[str] = None) -> None:
        result = self.phase_machine.transition_to(phase)
        if not result.success:
            raise RuntimeError(result.reason)
        if reason:
            logger.info("Phase %s: %s", phase.value, reason)

    async def _choose_starting_hands(self) -> None:
        for player in self.state.players:
            if player.forfeited:
                continue
            prompt = StartingHandPrompt(
                player_id=player.player_id,
                eligible_birds=tuple(player.hand),
                eligible_bonus_cards=tuple(player.bonus_cards),
            )
            try:
                choice = await self.broker.ask(prompt, trigger="startingHand")
            except AgentForfeitError as exc:
                await self.forfeit_player(exc.player_id, str(exc))
                continue
            await self.apply_effect(
                KeepStartingHandEffect(
                    player_id=player.player_id,
                    birds=list(choice.birds),
                    bonus_card=choice.bonus_card,
                    food_discarded=dict(choice.food_to_discard),
                )
            )

    async def _begin_round(self, round_number: int) -> None:
        turns = self.config.turns_by_round[round_number - 1]
        logger.info("Round %d begins (%d turns each)", round_number, turns)
        await self.apply_effect(BeginRoundEffect(round=round_number, turns=turns))
        self._seat_cursor = 0
        self._round_open = True
        await self.process_event(RoundStartedEvent(round=round_number))

    async def _end_round(self) -> None:
        self._round_open = False
        self._rounds_played += 1
        logger.info("Round %d ends", self.state.round)
        await self.process_event(RoundEndedEvent(round=self.state.round))

    def _next_player(self) -> str:
        """Next player in seat order who is still in the game and has turns left."""
        players = self.state.players
        for offset in range(len(players)):
            seat = (self._seat_cursor + offset) % len(players)
            player = players[seat]
            if not player.forfeited and player.turns_remaining > 0:
                self._seat_cursor = (seat + 1) % len(players)
                return player.player_id
        raise RuntimeError("No player has turns left this round")

    async def _play_turn(self, player_id: str) -> None:
        try:
            await self.run_turn(player_id)
        except AgentForfeitError as exc:
            if exc.player_id != player_id:
                raise
            await self.forfeit_player(player_id, str(exc))

    async def run_turn(self, player_id: str) -> None:
        """Run one full turn for a player.

        Raises:
            AgentForfeitError: If the player forfeits during the turn.
        """
        state = self.state
        player = state.get_player(player_id)
        await self.apply_effect(BeginTurnEffect(player_id=player_id))
        turn = state.turn
        await self.process_event(TurnStartedEvent(player_id=player_id, round=state.round, turn=turn))

        choice = await self.broker.ask(
            TurnActionPrompt(
                player_id=player_id,
                eligible_actions=tuple(eligible_actions(state, player)),
                rewards_by_action=action_rewards(state, player),
            ),
            trigger="turnAction",
        )
        logger.debug("%s takes %s (bonus=%s)", player_id, choice.action.value, choice.take_bonus)
        handler = self.registry.get_turn_action(choice.action)
        ctx = HandlerContext(state=state, player_id=player_id, config=self.config)
        result = await self.processor.run(handler(ctx, choice.take_bonus), player_id, trigger=choice.action.value)
        for event in result.events:
            await self.process_event(event)

        await self._run_continuations(player_id)
        await self.apply_effect(EndTurnEffect(player_id=player_id))
        await self.process_event(TurnEndedEvent(player_id=player_id, round=state.round, turn=turn))

    async def _run_continuations(self, player_id: str) -> None:
        state = self.state
        pending = [item for item in state.end_of_turn_continuations if item.player_id == player_id]
        state.end_of_turn_continuations = [
            item for item in state.end_of_turn_continuations if item.player_id != player_id
        ]
        for item in pending:
            logger.debug("Running continuation %s for %s", item.description, player_id)
            result = await self.processor.run(
                item.run(item.context), player_id, item.context.depth, trigger=item.description
            )
            for event in result.events:
                await self.process_event(event, item.context.depth + 1)

    async def forfeit_player(self, player_id: str, reason: str = "") -> None:
        """Remove a player from the game. Their score still counts, but they cannot win."""
        player = self.state.get_player(player_id)
        if player.forfeited:
            return
        logger.info("Player %s forfeits: %s", player_id, reason)
        await self.apply_effect(ForfeitPlayerEffect(player_id=player_id, reason=reason))
        self._forfeited.append(player_id)
        await self.process_event(PlayerForfeitedEvent(player_id=player_id, reason=reason))

    async def _finish(self) -> GameResult:
        state = self.state
        state.game_over = True
        breakdowns = score_game(state)
        scores = {player_id: breakdown.total for player_id, breakdown in breakdowns.items()}
        winner = determine_winner(state, scores)
        await self.process_event(GameEndedEvent(winner_id=winner, scores=dict(scores)))
        logger.info("Game over: winner %s, scores %s", winner, scores)
        return GameResult(
            winner_id=winner,
            scores=scores,
            rounds_played=self._rounds_played,
            total_turns=state.turn - 1,
            forfeited_players=list(self._forfeited),
            breakdowns=breakdowns,
        )

    # -------------------------------------------------------------------------
    # Scenario helpers
    # -------------------------------------------------------------------------

    async def run_single_turn(self, player_id: Optional[str] = None) -> None:
        """Run one turn outside the round loop.

        Starts round 1 first when no round has begun. Defaults to the active
        player of the state.
        """
        state = self.state
        if state.round == 0:
            await self.apply_effect(BeginRoundEffect(round=1, turns=self.config.turns_by_round[0]))
        await self._play_turn(player_id or state.active_player.player_id)

    async def execute_power(self, bird_instance_id: str, depth: int = 0) -> RunResult:
        """Run the power of a bird on the board, then process its events.

        Raises:
            ValueError: If no player has the bird on their board.
        """
        owner = self.state.find_bird_owner(bird_instance_id)
        if owner is None:
            raise ValueError(f"{bird_instance_id} is not on any board")
        return await self.run_power(owner.board.find_bird(bird_instance_id), owner.player_id, depth)

    async def run_power(
        self,
        bird: BirdInstance,
        owner_id: str,
        depth: int = 0,
    ) -> RunResult:
        result = await self.processor.execute_power(bird, owner_id, depth)
        for event in result.events:
            await self.process_event(event, depth + 1)
        return result

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def _notify_event(self, event: Event) -> None:
        for observer in self.observers:
            observer.on_event(event)

    async def process_event(self, event: Event, depth: int = 0) -> None:
        """Notify observers, then run the powers the event triggers.

        HABITAT_ACTIVATED runs the listed brown powers in order; BIRD_PLAYED
        runs the played bird's white power; then pink powers are offered.
        """
        self._notify_event(event)
        logger.debug("Event %s", event)
        if isinstance(event, HabitatActivatedEvent):
            await self._run_brown_powers(event, depth)
        elif isinstance(event, BirdPlayedEvent):
            await self._run_white_power(event, depth)
        if event.event_type in PINK_TRIGGER_EVENTS:
            await self._run_pink_powers(event, depth)

    async def _run_brown_powers(self, event: HabitatActivatedEvent, depth: int) -> None:
        owner = self.state.get_player(event.player_id)
        for bird_id in event.brown_birds:
            if owner.forfeited:
                return
            bird = owner.board.find_bird(bird_id)
            if bird is not None:
                await self.run_power(bird, owner.player_id, depth)

    async def _run_white_power(self, event: BirdPlayedEvent, depth: int) -> None:
        owner = self.state.get_player(event.player_id)
        bird = owner.board.find_bird(event.bird_instance_id)
        if bird is not None and bird.card.trigger == PowerTrigger.WHEN_PLAYED:
            await self.run_power(bird, owner.player_id, depth)

    async def _run_pink_powers(self, event: Event, depth: int) -> None:
        """Offer pink powers clockwise after the active player.

        Only events of the active player's turn qualify. Events produced by
        pink powers are passed to observers but trigger nothing.
        """
        state = self.state
        active_id = state.active_player.player_id
        if getattr(event, "player_id", None) != active_id:
            return
        for player in state.clockwise_order(active_id):
            for bird in player.board.all_birds():
                if player.forfeited:
                    break
                power = bird.card.power
                if power is None or power.trigger != PowerTrigger.ONCE_BETWEEN_TURNS:
                    continue
                if bird.instance_id in state.pink_activations:
                    continue
                rule = self.registry.get_pink_trigger(power.handler_id)
                if rule is None or not rule.matches(event, bird, power):
                    continue
                result = await self.processor.execute_power(bird, player.player_id, depth, trigger_event=event)
                for produced in result.events:
                    self._notify_event(produced)

    # -------------------------------------------------------------------------
    # Effects
    # -------------------------------------------------------------------------

    async def apply_effect(self, effect: Effect, depth: int = 0) -> None:
        """Apply an effect to the state, filling in its result fields.

        Observers see the effect first. Taking the last die from the feeder
        is followed by a REFILL_BIRDFEEDER effect.

        Raises:
            EffectApplicationError: If the effect would break a state invariant.
        """
        for observer in self.observers:
            observer.on_effect(effect)
        logger.debug("Effect %s", effect)

        if effect.effect_type == EffectType.REPEAT_BROWN_POWER:
            await self._apply_repeat_brown_power(effect, depth)
            return

        applier = self._appliers.get(effect.effect_type)
        if applier is None:
            raise EffectApplicationError(effect.effect_type.value, "no applier registered")
        try:
            applier(effect)
        except ValueError as exc:
            raise EffectApplicationError(effect.effect_type.value, str(exc)) from exc

        if effect.effect_type == EffectType.GAIN_FOOD and self.state.birdfeeder.is_empty():
            await self.apply_effect(RefillBirdfeederEffect(), depth)

    async def _apply_repeat_brown_power(self, effect, depth: int) -> None:
        player = self.state.get_player(effect.player_id)
        target = player.board.find_bird(effect.target_bird_id)
        if target is None:
            raise EffectApplicationError(
                effect.effect_type.value, f"{effect.target_bird_id} is not on {player.player_id}'s board"
            )
        if target.card.trigger != PowerTrigger.WHEN_ACTIVATED:
            raise EffectApplicationError(
                effect.effect_type.value, f"{effect.target_bird_id} has no when-activated power"
            )
        await self.run_power(target, player.player_id, depth + 1)

    # Helpers for appliers. They raise ValueError; apply_effect wraps it.

    def _bird(self, player: PlayerState, bird_id: Optional[str]) -> BirdInstance:
        bird = player.board.find_bird(bird_id) if bird_id else None
        if bird is None:
            raise ValueError(f"{bird_id} is not on {player.player_id}'s board")
        return bird

    def _take_revealed(self, card_ids: list[str]) -> list[BirdCard]:
        state = self.state
        cards = [state.revealed_card(card_id) for card_id in card_ids]
        if len(set(card_ids)) != len(card_ids):
            raise ValueError(f"Duplicate revealed cards: {card_ids}")
        for card in cards:
            state.revealed_cards.remove(card)
        return cards

    def _check_tray(self, card_ids: list[str]) -> None:
        supply = self.state.bird_supply
        if len(set(card_ids)) != len(card_ids):
            raise ValueError(f"Duplicate tray cards: {card_ids}")
        for card_id in card_ids:
            if supply.find_in_tray(card_id) is None:
                raise ValueError(f"{card_id} is not in the bird tray")

    def _check_deck(self, count: int) -> None:
        if count < 0 or count > self.state.bird_supply.available:
            raise ValueError(f"Cannot take {count} cards from the deck ({self.state.bird_supply.available} left)")

    @staticmethod
    def _check_food(food: dict[FoodType, int]) -> dict[FoodType, int]:
        if any(count < 0 for count in food.values()):
            raise ValueError(f"Negative food amount in {food}")
        if food.get(FoodType.WILD):
            raise ValueError("Wild is not a real food")
        return {item: count for item, count in food.items() if count}

    def _lay(self, player: PlayerState, placements: dict[str, int]) -> None:
        birds = {bird_id: self._bird(player, bird_id) for bird_id in placements}
        for bird_id, count in placements.items():
            if count < 0 or count > birds[bird_id].remaining_egg_capacity:
                raise ValueError(f"{bird_id} has room for {birds[bird_id].remaining_egg_capacity} eggs, not {count}")
        for bird_id, count in placements.items():
            birds[bird_id].lay_eggs(count)

    # Power bookkeeping

    def _apply_activate_power(self, effect) -> None:
        if not effect.activated:
            return
        bird = self.state.find_bird(effect.bird_instance_id)
        if bird is not None and bird.card.trigger == PowerTrigger.ONCE_BETWEEN_TURNS:
            self.state.pink_activations.add(bird.instance_id)

    # Food

    def _apply_gain_food(self, effect) -> None:
        player = self.state.get_player(effect.player_id)
        food = self._check_food(effect.food)
        bird = None
        if effect.destination == FoodDestination.CACHE_ON_SOURCE_BIRD:
            bird = self._bird(player, effect.bird_instance_id)
        if effect.source == FoodSource.BIRDFEEDER:
            feeder = self.state.birdfeeder
            if len(effect.dice_taken) != sum(food.values()):
                raise ValueError("Exactly one die is taken per food gained from the birdfeeder")
            held = Counter(feeder.dice)
            for face, count in Counter(effect.dice_taken).items():
                if held[face] < count:
                    raise ValueError(f"Not enough {face.value} dice in the birdfeeder")
            for face in effect.dice_taken:
                feeder.take_die(face)
        for item, count in food.items():
            if bird is not None:
                bird.cache_food(item, count)
            else:
                player.gain_food(item, count)

    def _apply_discard_food(self, effect) -> None:
        player = self.state.get_player(effect.player_id)
        player.spend_food(self._check_food(effect.food))

    def _apply_cache_food(self, effect) -> None:
        player = self.state.get_player(effect.player_id)
        if effect.count < 0:
            raise ValueError(f"Cannot cache {effect.count} food")
        self._bird(player, effect.bird_instance_id).cache_food(effect.food, effect.count)

    def _apply_all_players_gain_food(self, effect) -> None:
        gains = [
            (self.state.get_player(player_id), self._check_food(food)) for player_id, food in effect.gains.items()
        ]
        for player, food in gains:
            for item, count in food.items():
                player.gain_food(item, count)

    def _apply_roll_dice(self, effect) -> None:
        effect.rolled = self.state.birdfeeder.roll_outside()

    def _apply_reroll_birdfeeder(self, effect) -> None:
        effect.dice = self.state.birdfeeder.reroll_all()

    def _apply_refill_birdfeeder(self, effect) -> None:
        effect.dice = self.state.birdfeeder.refill()

    # Eggs

    def _apply_lay_eggs(self, effect) -> None:
        self._lay(self.state.get_player(effect.player_id), effect.placements)

    def _apply_discard_eggs(self, effect) -> None:
        player = self.state.get_player(effect.player_id)
        birds = {bird_id: self._bird(player, bird_id) for bird_id in effect.sources}
        for bird_id, count in effect.sources.items():
            if count < 0 or count > birds[bird_id].eggs:
                raise ValueError(f"{bird_id} holds {birds[bird_id].eggs} eggs, cannot discard {count}")
        for bird_id, count in effect.sources.items():
            birds[bird_id].remove_eggs(count)

    def _apply_all_players_lay_eggs(self, effect) -> None:
        for player_id, placements in effect.placements.items():
            self._lay(self.state.get_player(player_id), placements)

    # Cards

    def _apply_draw_cards(self, effect) -> None:
        state = self.state
        player = state.get_player(effect.player_id)
        supply = state.bird_supply
        self._check_tray(effect.from_tray)
        self._check_deck(effect.from_deck)
        for card_id in effect.from_revealed:
            state.revealed_card(card_id)

        from_tray = [supply.take_from_tray(card_id) for card_id in effect.from_tray]
        from_deck = supply.draw_from_deck(effect.from_deck)
        from_revealed = self._take_revealed(effect.from_revealed)
        effect.drawn_from_deck = [card.id for card in from_deck]
        player.hand.extend(from_tray + from_deck + from_revealed)

    def _apply_discard_cards(self, effect) -> None:
        player = self.state.get_player(effect.player_id)
        if effect.source == CardSource.HAND:
            cards = player.remove_from_hand(effect.card_ids)
        else:
            cards = self._take_revealed(effect.card_ids)
        self.state.bird_supply.discard(cards)

    def _apply_tuck_cards(self, effect) -> None:
        state = self.state
        player = state.get_player(effect.player_id)
        bird = self._bird(player, effect.bird_instance_id)
        self._check_deck(effect.from_deck)
        for card_id in effect.from_revealed:
            state.revealed_card(card_id)
        player.remove_from_hand(effect.from_hand)
        from_deck = state.bird_supply.draw_from_deck(effect.from_deck)
        self._take_revealed(effect.from_revealed)
        effect.tucked_from_deck = [card.id for card in from_deck]
        bird.tuck(effect.total)

    def _apply_reveal_cards(self, effect) -> None:
        self._check_deck(effect.count)
        cards = self.state.bird_supply.draw_from_deck(effect.count)
        self.state.revealed_cards.extend(cards)
        effect.revealed = [card.id for card in cards]

    def _apply_reveal_bonus_cards(self, effect) -> None:
        deck = self.state.bonus_deck
        if effect.count < 0 or effect.count > deck.available:
            raise ValueError(f"Cannot reveal {effect.count} bonus cards ({deck.available} left)")
        cards = deck.draw(effect.count)
        self.state.revealed_bonus_cards.extend(cards)
        effect.revealed = [card.id for card in cards]

    def _apply_draw_bonus_cards(self, effect) -> None:
        state = self.state
        player = state.get_player(effect.player_id)
        ids = effect.kept + effect.discarded
        if len(set(ids)) != len(ids):
            raise ValueError(f"Bonus cards listed twice: {ids}")
        cards = {card_id: state.revealed_bonus_card(card_id) for card_id in ids}
        for card in cards.values():
            state.revealed_bonus_cards.remove(card)
        player.bonus_cards.extend(cards[card_id] for card_id in effect.kept)
        state.bonus_deck.discard(cards[card_id] for card_id in effect.discarded)

    def _apply_all_players_draw_cards(self, effect) -> None:
        state = self.state
        players = {player_id: state.get_player(player_id) for player_id in effect.draws}
        if any(count < 0 for count in effect.draws.values()):
            raise ValueError(f"Negative draw in {effect.draws}")
        self._check_deck(sum(effect.draws.values()))
        for player_id, count in effect.draws.items():
            cards = state.bird_supply.draw_from_deck(count)
            players[player_id].hand.extend(cards)
            effect.drawn[player_id] = [card.id for card in cards]

    def _apply_refill_bird_tray(self, effect) -> None:
        effect.added = [card.id for card in self.state.bird_supply.refill_tray()]

    # Birds

    def _apply_play_bird(self, effect) -> None:
        state = self.state
        player = state.get_player(effect.player_id)
        board = player.board
        card = player.find_in_hand(effect.card_id)
        if card is None:
            raise ValueError(f"{effect.card_id} is not in {player.player_id}'s hand")
        if not card.can_live_in(effect.habitat):
            raise ValueError(f"{card.name} cannot live in {effect.habitat.value}")
        if not board.has_space(effect.habitat):
            raise ValueError(f"{effect.habitat.value} is full")

        egg_cost = state.board_config.egg_cost(board.leftmost_empty_column(effect.habitat))
        if sum(effect.eggs_paid.values()) != egg_cost:
            raise ValueError(f"Playing into {effect.habitat.value} costs {egg_cost} eggs")
        reason = payment_error(card, effect.food_paid)
        if reason is not None:
            raise ValueError(reason)
        food = self._check_food(effect.food_paid)
        if not player.has_food(food):
            raise ValueError(f"{player.player_id} cannot pay {food}")
        egg_birds = {bird_id: self._bird(player, bird_id) for bird_id in effect.eggs_paid}
        for bird_id, count in effect.eggs_paid.items():
            if count < 0 or count > egg_birds[bird_id].eggs:
                raise ValueError(f"{bird_id} holds {egg_birds[bird_id].eggs} eggs, cannot pay {count}")

        player.spend_food(food)
        for bird_id, count in effect.eggs_paid.items():
            egg_birds[bird_id].remove_eggs(count)
        player.remove_from_hand([card.id])
        bird = BirdInstance(instance_id=make_bird_instance_id(player.player_id, card.id), card=card)
        effect.column = board.place_bird(bird, effect.habitat)
        effect.bird_instance_id = bird.instance_id

    def _apply_move_bird(self, effect) -> None:
        player = self.state.get_player(effect.player_id)
        bird = self._bird(player, effect.bird_instance_id)
        if player.board.habitat_of(bird.instance_id) != effect.from_habitat:
            raise ValueError(f"{bird.instance_id} is not in {effect.from_habitat.value}")
        if not bird.card.can_live_in(effect.to_habitat):
            raise ValueError(f"{bird.card.name} cannot live in {effect.to_habitat.value}")
        if not player.board.has_space(effect.to_habitat):
            raise ValueError(f"{effect.to_habitat.value} is full")
        player.board.remove_bird(bird.instance_id)
        player.board.place_bird(bird, effect.to_habitat)

    # Game loop

    def _apply_keep_starting_hand(self, effect) -> None:
        state = self.state
        player = state.get_player(effect.player_id)
        for card_id in effect.birds:
            if player.find_in_hand(card_id) is None:
                raise ValueError(f"{card_id} is not in {player.player_id}'s hand")
        bonus = next((card for card in player.bonus_cards if card.id == effect.bonus_card), None)
        if bonus is None:
            raise ValueError(f"{effect.bonus_card} was not dealt to {player.player_id}")
        food = self._check_food(effect.food_discarded)
        if not player.has_food(food):
            raise ValueError(f"{player.player_id} cannot discard {food}")

        kept = set(effect.birds)
        state.bird_supply.discard(card for card in player.hand if card.id not in kept)
        player.hand = [card for card in player.hand if card.id in kept]
        state.bonus_deck.discard(card for card in player.bonus_cards if card is not bonus)
        player.bonus_cards = [bonus]
        player.spend_food(food)

    def _apply_begin_round(self, effect) -> None:
        self.state.round = effect.round
        for player in self.state.players:
            if not player.forfeited:
                player.turns_remaining = effect.turns

    def _apply_begin_turn(self, effect) -> None:
        state = self.state
        player = state.get_player(effect.player_id)
        state.active_player_index = state.seat_of(player.player_id)
        state.pink_activations -= {bird.instance_id for bird in player.board}

    def _apply_end_turn(self, effect) -> None:
        state = self.state
        player = state.get_player(effect.player_id)
        player.turns_remaining = max(0, player.turns_remaining - 1)
        state.turn += 1
        state.end_of_turn_continuations.clear()

    def _apply_forfeit_player(self, effect) -> None:
        state = self.state
        player = state.get_player(effect.player_id)
        player.forfeited = True
        player.turns_remaining = 0
        state.end_of_turn_continuations = [
            item for item in state.end_of_turn_continuations if item.player_id != player.player_id
        ]

    def __str__(self) -> str:
        players = ", ".join(self._state.player_ids) if self._state else "-"
        return f"GameEngine(players=[{players}], phase={self.phase.value})"

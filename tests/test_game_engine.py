"""Tests for the game engine: setup, the turn loop, the prompt protocol,
power triggers and whole games.
"""

import asyncio
from dataclasses import replace

import pytest

from agents.random_agent import RandomAgent
from agents.scripted_agent import ScriptedAgent
from core.cards import BonusTrade
from core.constants import (
    DieFace,
    FoodSource,
    FoodType,
    Habitat,
    NestType,
    Phase,
    PowerTrigger,
    Resource,
    TurnActionKind,
    DIE_FACES,
    FOOD_TYPES,
)
from core.errors import (
    ConfigurationError,
    EffectApplicationError,
    ProtocolViolationError,
    UnknownHandlerError,
)
from core.rng import PresetRandom
from data.loader import CardRegistry, load_default_content
from engine.config import EngineConfig
from engine.decisions import DecisionBroker
from engine.effects import AllPlayersGainFoodEffect, DiscardFoodEffect, EffectType, GainFoodEffect
from engine.events import EventType
from engine.game_engine import GameEngine
from engine.handlers.turn_actions import eligible_actions
from engine.observer import EventLog
from engine.prompts import (
    ActionReward,
    ActivatePowerChoice,
    DieSelection,
    DrawCardsChoice,
    PlaceEggsChoice,
    PlayBirdChoice,
    PromptKind,
    SelectCardsChoice,
    SelectFoodFromFeederChoice,
    StartingHandChoice,
    TurnActionChoice,
    TurnActionPrompt,
)

from scenario import Scenario, build_state, filler_birds, make_bird, make_bonus, make_power, place_bird

ACTIVATE = ActivatePowerChoice("")


def action(kind, take_bonus=False):
    return TurnActionChoice("", action=kind, take_bonus=take_bonus)


def take(face):
    return SelectFoodFromFeederChoice("", dice=(DieSelection(face),))


def random_game(seed, observers=()):
    engine = GameEngine(
        load_default_content(),
        [RandomAgent("p1", seed + 1), RandomAgent("p2", seed + 2)],
        seed=seed,
        observers=observers,
    )
    return engine, asyncio.run(engine.play_game())


# =============================================================================
# Setup
# =============================================================================


class TestSetup:
    """Test engine construction and game setup."""

    def test_default_setup(self):
        engine = GameEngine(load_default_content(), [RandomAgent("p1", 1), RandomAgent("p2", 2)], seed=7)
        state = engine.setup_game()

        assert state.player_ids == ["p1", "p2"]
        for player in state.players:
            assert len(player.hand) == 5
            assert len(player.bonus_cards) == 2
            assert all(player.food[food] == 1 for food in FOOD_TYPES)
        assert len(state.bird_supply.tray_cards()) == 3
        assert len(state.birdfeeder) == 5
        assert state.round == 0
        assert engine.phase == Phase.AWAITING_STARTING_HAND

    def test_same_seed_same_setup(self):
        def deal(seed):
            engine = GameEngine(load_default_content(), [RandomAgent("p1"), RandomAgent("p2")], seed=seed)
            state = engine.setup_game()
            return [p.hand_ids for p in state.players], state.birdfeeder.dice

        assert deal(11) == deal(11)

    def test_duplicate_player_ids(self):
        with pytest.raises(ConfigurationError):
            GameEngine(load_default_content(), [RandomAgent("p1"), RandomAgent("p1")])

    def test_unknown_handler(self):
        """Content naming a handler that does not exist is refused up front."""
        content = CardRegistry([make_bird("odd", power=make_power("noSuchPower"))], [])
        with pytest.raises(UnknownHandlerError) as exc_info:
            GameEngine(content, [RandomAgent("p1")])
        assert exc_info.value.handler_id == "noSuchPower"

    def test_state_before_setup(self):
        engine = GameEngine(load_default_content(), [RandomAgent("p1")])
        with pytest.raises(RuntimeError):
            engine.state


# =============================================================================
# Scripted solo game
# =============================================================================


class TestScriptedGame:
    """Test a short solo game played from a script."""

    @pytest.fixture
    def played(self):
        content = CardRegistry(filler_birds(20), [make_bonus(f"bonus_{i}") for i in range(4)])
        script = [
            StartingHandChoice("", birds=("filler_3",), bonus_card="bonus_0", food_to_discard={FoodType.FISH: 1}),
            # Round 1
            action(TurnActionKind.PLAY_BIRD),
            PlayBirdChoice("", bird="filler_3", habitat=Habitat.FOREST, food_to_spend={FoodType.SEED: 1}),
            action(TurnActionKind.GAIN_FOOD),
            take(DieFace.FISH),
            # Round 2
            action(TurnActionKind.LAY_EGGS),
            PlaceEggsChoice("", placements={"solo_filler_3": 2}),
        ]
        agent = ScriptedAgent("solo", script)
        log = EventLog()
        engine = GameEngine(
            content,
            [agent],
            config=EngineConfig(turns_by_round=(2, 1)),
            observers=[log],
            rng=PresetRandom([0, 1, 2, 3, 4], cycle=True),
        )
        result = asyncio.run(engine.play_game())
        return engine, agent, log, result

    def test_result(self, played):
        engine, agent, _, result = played
        assert result.rounds_played == 2
        assert result.total_turns == 3
        assert result.winner_id == "solo"
        assert result.scores == {"solo": 4}
        assert result.breakdowns["solo"].eggs == 2
        assert result.forfeited_players == []
        assert engine.phase == Phase.GAME_ENDED
        assert engine.state.game_over
        assert agent.is_exhausted()

    def test_final_position(self, played):
        engine, _, _, _ = played
        player = engine.state.get_player("solo")
        assert [b.instance_id for b in player.board.birds_in_habitat(Habitat.FOREST)] == ["solo_filler_3"]
        assert player.food == {
            FoodType.INVERTEBRATE: 1,
            FoodType.SEED: 0,
            FoodType.FISH: 1,
            FoodType.FRUIT: 1,
            FoodType.RODENT: 1,
        }
        assert [card.id for card in player.bonus_cards] == ["bonus_0"]
        assert player.hand == []

    def test_event_sequence(self, played):
        _, _, log, _ = played
        assert [e.round for e in log.events_of(EventType.ROUND_STARTED)] == [1, 2]
        assert [e.turn for e in log.events_of(EventType.TURN_STARTED)] == [1, 2, 3]
        assert len(log.events_of(EventType.GAME_STARTED)) == 1
        (ended,) = log.events_of(EventType.GAME_ENDED)
        assert ended.winner_id == "solo"

    def test_prompt_context(self, played):
        """Starting hands come before any round; turns carry round and turn."""
        _, agent, _, _ = played
        starting = agent.prompts[0]
        assert starting.context.round == 0
        assert starting.context.active_player_id is None
        assert starting.context.trigger == "startingHand"
        last_turn = agent.prompts_of(PromptKind.TURN_ACTION)[-1]
        assert (last_turn.context.round, last_turn.context.turn) == (2, 3)
        assert last_turn.context.active_player_id == "solo"
        assert [p.prompt_id for p in agent.prompts] == [f"prompt_{i}" for i in range(1, 8)]


# =============================================================================
# Turn actions
# =============================================================================


class TestTurnActions:
    """Test the four turn actions one turn at a time."""

    def test_gain_food_with_card_bonus(self):
        state = build_state()
        alice = state.get_player("alice")
        alice.hand.extend(state.bird_supply.draw_from_deck(1))
        place_bird(state, "alice", make_bird("perch"), Habitat.FOREST)
        script = [
            action(TurnActionKind.GAIN_FOOD, take_bonus=True),
            SelectCardsChoice("", cards=("filler_3",)),
            take(DieFace.SEED),
            take(DieFace.FISH),
        ]
        sc = Scenario(state, {"alice": script})
        sc.turn("alice")

        prompt = sc.agents["alice"].prompts[0]
        assert isinstance(prompt, TurnActionPrompt)
        assert prompt.rewards_by_action[TurnActionKind.GAIN_FOOD] == ActionReward(
            reward=1, bonus=BonusTrade(pay=Resource.CARD), bonus_available=True
        )
        assert alice.hand == []
        assert (alice.food[FoodType.SEED], alice.food[FoodType.FISH]) == (1, 1)
        assert state.bird_supply.deck.discard_size == 1
        (gained,) = sc.log.events_of(EventType.FOOD_GAINED_FROM_HABITAT_ACTIVATION)
        assert gained.food == {FoodType.SEED: 1, FoodType.FISH: 1}
        assert state.turn == 2
        assert alice.turns_remaining == 7

    def test_gain_food_leaves_partial_feeder(self):
        """Taking one die from a mixed feeder neither rerolls nor refills it."""
        feeder = [DieFace.SEED, DieFace.SEED, DieFace.INVERTEBRATE, DieFace.FISH, DieFace.FRUIT]
        state = build_state(feeder=feeder)
        sc = Scenario(state, {"alice": [action(TurnActionKind.GAIN_FOOD), take(DieFace.SEED)]})
        sc.turn("alice")

        (prompt,) = sc.agents["alice"].prompts_of(PromptKind.SELECT_FOOD_FROM_FEEDER)
        assert not prompt.can_reroll
        assert sc.player("alice").food[FoodType.SEED] == 1
        assert sc.player("alice").total_food() == 1
        assert sorted(state.birdfeeder.dice, key=DIE_FACES.index) == [
            DieFace.INVERTEBRATE,
            DieFace.SEED,
            DieFace.FISH,
            DieFace.FRUIT,
        ]
        assert sc.log.effects_of(EffectType.REFILL_BIRDFEEDER) == []

    def test_reroll_single_face_feeder(self):
        state = build_state(feeder=[DieFace.FISH, DieFace.FISH], rng=PresetRandom([0, 1, 2, 3, 4]))
        script = [
            action(TurnActionKind.GAIN_FOOD),
            SelectFoodFromFeederChoice("", reroll=True),
            take(DieFace.RODENT),
        ]
        sc = Scenario(state, {"alice": script})
        sc.turn("alice")

        first, second = sc.agents["alice"].prompts_of(PromptKind.SELECT_FOOD_FROM_FEEDER)
        assert first.can_reroll
        assert not second.can_reroll
        assert sc.player("alice").food[FoodType.RODENT] == 1
        assert len(state.birdfeeder) == 4
        assert len(sc.log.effects_of(EffectType.REROLL_BIRDFEEDER)) == 1

    def test_lay_eggs(self):
        """Grassland activates before the eggs-laid event."""
        state = build_state()
        nest = place_bird(state, "alice", make_bird("nest"), Habitat.FOREST)
        sc = Scenario(state, {"alice": [action(TurnActionKind.LAY_EGGS), PlaceEggsChoice("", placements={"alice_nest": 2})]})
        sc.turn("alice")

        assert nest.eggs == 2
        kinds = [
            e.event_type
            for e in sc.log.events
            if e.event_type in (EventType.HABITAT_ACTIVATED, EventType.EGGS_LAID_FROM_HABITAT_ACTIVATION)
        ]
        assert kinds == [EventType.HABITAT_ACTIVATED, EventType.EGGS_LAID_FROM_HABITAT_ACTIVATION]
        (activated,) = sc.log.events_of(EventType.HABITAT_ACTIVATED)
        assert activated.habitat == Habitat.GRASSLAND

    def test_eligible_actions_on_empty_board(self):
        """No bird to lay on and no hand to play from."""
        state = build_state()
        assert eligible_actions(state, state.get_player("alice")) == [TurnActionKind.GAIN_FOOD, TurnActionKind.DRAW_CARDS]

    def test_draw_from_tray(self):
        state = build_state()
        sc = Scenario(state, {"alice": [action(TurnActionKind.DRAW_CARDS), DrawCardsChoice("", tray_cards=("filler_1",))]})
        sc.turn("alice")

        assert sc.player("alice").hand_ids == ["filler_1"]
        assert state.bird_supply.tray_ids() == ["filler_0", "filler_2", "filler_3"]

    def test_brown_powers_right_to_left(self):
        state = build_state()
        place_bird(state, "alice", make_bird("cardinal", power=make_power("gainFoodFromSupply", food="fruit")), Habitat.FOREST)
        place_bird(state, "alice", make_bird("jay", power=make_power("gainFoodFromSupply", food="seed")), Habitat.FOREST)
        script = [
            action(TurnActionKind.GAIN_FOOD),
            take(DieFace.INVERTEBRATE),
            take(DieFace.FISH),
            ACTIVATE,
            ACTIVATE,
        ]
        sc = Scenario(state, {"alice": script})
        sc.turn("alice")

        (activated,) = sc.log.events_of(EventType.HABITAT_ACTIVATED)
        assert activated.brown_birds == ["alice_jay", "alice_cardinal"]
        assert [a.bird_instance_id for a in sc.activations()] == ["alice_jay", "alice_cardinal"]
        food = sc.player("alice").food
        assert (food[FoodType.INVERTEBRATE], food[FoodType.FISH], food[FoodType.SEED], food[FoodType.FRUIT]) == (1, 1, 1, 1)

    def test_white_power_on_play(self):
        state = build_state()
        alice = state.get_player("alice")
        alice.hand.append(make_bird("gull", power=make_power("drawCards", PowerTrigger.WHEN_PLAYED, count=2)))
        alice.gain_food(FoodType.SEED)
        script = [
            action(TurnActionKind.PLAY_BIRD),
            PlayBirdChoice("", bird="gull", habitat=Habitat.WETLAND, food_to_spend={FoodType.SEED: 1}),
            ACTIVATE,
        ]
        sc = Scenario(state, {"alice": script})
        sc.turn("alice")

        assert alice.board.habitat_of("alice_gull") == Habitat.WETLAND
        assert alice.hand_ids == ["filler_3", "filler_4"]


# =============================================================================
# Prompt protocol
# =============================================================================


class WrongIdAgent(RandomAgent):
    """Answers turn prompts with a stale prompt id."""

    async def choose_turn_action(self, prompt):
        choice = await super().choose_turn_action(prompt)
        return replace(choice, prompt_id="prompt_999")


class TestPromptProtocol:
    """Test retries, forfeits and protocol violations."""

    def test_forfeit_after_invalid_answers(self):
        """Each retry carries the previous error; the third miss forfeits."""
        state = build_state()
        sc = Scenario(state, {"alice": [action(TurnActionKind.LAY_EGGS)] * 3})
        sc.turn("alice")

        prompts = sc.agents["alice"].prompts
        assert len(prompts) == 3
        assert prompts[0].previous_error is None
        assert prompts[1].previous_error.code == "INVALID_ACTION"
        assert len({p.prompt_id for p in prompts}) == 1
        assert sc.player("alice").forfeited
        assert sc.player("alice").turns_remaining == 0
        (forfeited,) = sc.log.events_of(EventType.PLAYER_FORFEITED)
        assert forfeited.player_id == "alice"

    def test_recovers_after_one_invalid_answer(self):
        state = build_state()
        script = [action(TurnActionKind.LAY_EGGS), action(TurnActionKind.DRAW_CARDS), DrawCardsChoice("", deck_count=1)]
        sc = Scenario(state, {"alice": script})
        sc.turn("alice")
        assert not sc.player("alice").forfeited
        assert sc.player("alice").hand_ids == ["filler_3"]

    def test_other_player_forfeit_aborts_power(self):
        """A non-active player forfeiting mid-power stops the power only."""
        state = build_state()
        place_bird(state, "alice", make_bird("jay", power=make_power("drawAndDistributeCards", PowerTrigger.WHEN_PLAYED)), Habitat.FOREST)
        scripts = {
            "alice": [ACTIVATE, SelectCardsChoice("", cards=("filler_3",))],
            "bob": [SelectCardsChoice("", cards=("nope",))] * 3,
        }
        sc = Scenario(state, scripts)
        result = sc.power("alice_jay")

        assert result.aborted
        assert sc.player("bob").forfeited
        assert not sc.player("alice").forfeited
        assert sc.player("alice").hand_ids == ["filler_3"]
        assert state.revealed_cards == []
        assert state.bird_supply.deck.discard_size == 2

    def test_wrong_choice_type(self):
        state = build_state()
        sc = Scenario(state, {"alice": [ACTIVATE]})
        sc.agents["alice"].strict = False
        with pytest.raises(ProtocolViolationError):
            sc.turn("alice")

    def test_wrong_prompt_id(self):
        state = build_state()
        content = CardRegistry(filler_birds(12), [make_bonus("bonus_0")])
        engine = GameEngine(content, [WrongIdAgent("alice"), WrongIdAgent("bob")], rng=PresetRandom())
        engine.setup_game(state)
        with pytest.raises(ProtocolViolationError) as exc_info:
            asyncio.run(engine.run_single_turn("alice"))
        assert exc_info.value.prompt_id == "prompt_1"
        assert engine.broker.outstanding_prompt is None

    def test_broker_without_state(self):
        broker = DecisionBroker({}, EngineConfig())
        with pytest.raises(ConfigurationError):
            asyncio.run(broker.ask(TurnActionPrompt("alice")))

    def test_broker_without_agent(self):
        broker = DecisionBroker({}, EngineConfig())
        broker.state = build_state()
        with pytest.raises(ConfigurationError):
            asyncio.run(broker.ask(TurnActionPrompt("alice")))


# =============================================================================
# Pink powers
# =============================================================================


class TestPinkPowers:
    """Test once-between-turns powers across turns."""

    @pytest.fixture
    def state(self):
        state = build_state()
        place_bird(state, "alice", make_bird("nest"), Habitat.FOREST)
        place_bird(
            state,
            "bob",
            make_bird(
                "sandpiper",
                nest_type=NestType.GROUND,
                power=make_power(
                    "whenOpponentLaysEggsLayEggOnNestType", PowerTrigger.ONCE_BETWEEN_TURNS, nest_type="ground"
                ),
            ),
            Habitat.WETLAND,
        )
        return state

    def test_fires_once_between_turns(self, state):
        scripts = {
            "alice": [
                action(TurnActionKind.LAY_EGGS),
                PlaceEggsChoice("", placements={"alice_nest": 2}),
                action(TurnActionKind.LAY_EGGS),
                PlaceEggsChoice("", placements={"alice_nest": 1}),
            ],
            "bob": [ACTIVATE, PlaceEggsChoice("", placements={"bob_sandpiper": 1})],
        }
        sc = Scenario(state, scripts)
        sc.turn("alice")
        sc.turn("alice")

        assert state.find_bird("bob_sandpiper").eggs == 1
        assert len(sc.agents["bob"].prompts) == 2
        assert sc.agents["bob"].prompts[0].context.active_player_id == "alice"
        assert "bob_sandpiper" in state.pink_activations

    def test_owner_turn_resets(self, state):
        scripts = {
            "alice": [action(TurnActionKind.LAY_EGGS), PlaceEggsChoice("", placements={"alice_nest": 2})],
            "bob": [
                ACTIVATE,
                PlaceEggsChoice("", placements={"bob_sandpiper": 1}),
                action(TurnActionKind.DRAW_CARDS),
                DrawCardsChoice("", deck_count=1),
            ],
        }
        sc = Scenario(state, scripts)
        sc.turn("alice")
        sc.turn("bob")
        assert state.pink_activations == set()

    def test_not_triggered_by_own_turn(self, state):
        """Bob's own egg laying does not trigger his pink power."""
        scripts = {"bob": [action(TurnActionKind.LAY_EGGS), PlaceEggsChoice("", placements={"bob_sandpiper": 2})]}
        sc = Scenario(state, scripts)
        sc.turn("bob")
        assert len(sc.agents["bob"].prompts) == 2
        assert sc.agents["alice"].prompts == []

    def test_offered_clockwise_after_active_player(self):
        """With bob active, carol is offered her pink power before alice."""
        sandpiper = make_bird(
            "sandpiper",
            nest_type=NestType.GROUND,
            power=make_power(
                "whenOpponentLaysEggsLayEggOnNestType", PowerTrigger.ONCE_BETWEEN_TURNS, nest_type="ground"
            ),
        )
        state = build_state(player_ids=("alice", "bob", "carol"))
        place_bird(state, "alice", sandpiper, Habitat.WETLAND)
        place_bird(state, "carol", sandpiper, Habitat.WETLAND)
        place_bird(state, "bob", make_bird("nest"), Habitat.FOREST)
        scripts = {
            "bob": [action(TurnActionKind.LAY_EGGS), PlaceEggsChoice("", placements={"bob_nest": 2})],
            "carol": [ACTIVATE, PlaceEggsChoice("", placements={"carol_sandpiper": 1})],
            "alice": [ACTIVATE, PlaceEggsChoice("", placements={"alice_sandpiper": 1})],
        }
        sc = Scenario(state, scripts)
        sc.turn("bob")

        assert [effect.bird_instance_id for effect in sc.activations()] == ["carol_sandpiper", "alice_sandpiper"]
        assert all(effect.activated for effect in sc.activations())
        assert state.find_bird("carol_sandpiper").eggs == 1
        assert state.find_bird("alice_sandpiper").eggs == 1

    def test_predator_success_triggers(self):
        state = build_state(rng=PresetRandom([4]))
        hawk = place_bird(
            state, "alice", make_bird("hawk", power=make_power("rollDiceAndCacheIfMatch", food="rodent")), Habitat.FOREST
        )
        place_bird(
            state,
            "bob",
            make_bird(
                "vulture",
                power=make_power("whenOpponentPredatorSucceedsGainFood", PowerTrigger.ONCE_BETWEEN_TURNS, food="rodent"),
            ),
            Habitat.GRASSLAND,
        )
        scripts = {
            "alice": [action(TurnActionKind.GAIN_FOOD), take(DieFace.SEED), ACTIVATE],
            "bob": [ACTIVATE, take(DieFace.RODENT)],
        }
        sc = Scenario(state, scripts)
        sc.turn("alice")

        assert hawk.cached_food == {FoodType.RODENT: 1}
        assert sc.player("bob").food[FoodType.RODENT] == 1
        assert "bob_vulture" in state.pink_activations


# =============================================================================
# End-of-turn continuations
# =============================================================================


class TestContinuations:
    """Test work deferred to the end of the turn."""

    def test_delayed_discard(self):
        state = build_state()
        place_bird(state, "alice", make_bird("tern", power=make_power("drawCardsWithDelayedDiscard")), Habitat.WETLAND)
        script = [
            action(TurnActionKind.DRAW_CARDS),
            DrawCardsChoice("", deck_count=1),
            ACTIVATE,
            SelectCardsChoice("", cards=("filler_4",)),
        ]
        sc = Scenario(state, {"alice": script})
        sc.turn("alice")

        assert sc.player("alice").hand_ids == ["filler_3", "filler_5"]
        assert state.bird_supply.deck.discard_size == 1
        assert state.end_of_turn_continuations == []
        discard_prompt = sc.agents["alice"].prompts[-1]
        assert discard_prompt.kind == PromptKind.SELECT_CARDS


# =============================================================================
# Effect application
# =============================================================================


class TestApplyEffect:
    """Test that effects breaking the rules are refused."""

    def test_missing_die(self):
        sc = Scenario(build_state())
        gain = GainFoodEffect(
            player_id="alice",
            food={FoodType.SEED: 1},
            source=FoodSource.BIRDFEEDER,
            dice_taken=[DieFace.SEED_INVERTEBRATE],
        )
        with pytest.raises(EffectApplicationError) as exc_info:
            asyncio.run(sc.engine.apply_effect(gain))
        assert exc_info.value.effect_type == EffectType.GAIN_FOOD.value
        assert len(sc.state.birdfeeder) == 5

    def test_spending_food_not_held(self):
        sc = Scenario(build_state())
        with pytest.raises(EffectApplicationError):
            asyncio.run(sc.engine.apply_effect(DiscardFoodEffect(player_id="alice", food={FoodType.FISH: 1})))

    def test_observers_see_effects(self):
        sc = Scenario(build_state())
        gain = GainFoodEffect(player_id="alice", food={FoodType.FISH: 2}, source=FoodSource.SUPPLY)
        asyncio.run(sc.engine.apply_effect(gain))
        assert sc.log.effects == [gain]
        assert sc.player("alice").food[FoodType.FISH] == 2

    def test_all_players_gain_food(self):
        sc = Scenario(build_state())
        gains = {"alice": {FoodType.SEED: 1}, "bob": {FoodType.FISH: 2}}
        asyncio.run(sc.engine.apply_effect(AllPlayersGainFoodEffect(gains=gains)))
        assert sc.player("alice").food[FoodType.SEED] == 1
        assert sc.player("bob").food[FoodType.FISH] == 2


# =============================================================================
# Whole games
# =============================================================================


class TestRandomGames:
    """Test complete games between random agents."""

    def test_deterministic(self):
        first_log, second_log = EventLog(), EventLog()
        _, first = random_game(3, [first_log])
        _, second = random_game(3, [second_log])
        assert first.scores == second.scores
        assert first_log.signature() == second_log.signature()

    @pytest.mark.parametrize("seed", [1, 2, 5])
    def test_full_game(self, seed):
        engine, result = random_game(seed)
        state = engine.state

        assert result.forfeited_players == []
        assert result.rounds_played == 4
        assert result.total_turns == 2 * sum(EngineConfig().turns_by_round)
        assert result.winner_id in ("p1", "p2")
        assert result.scores == {pid: b.total for pid, b in result.breakdowns.items()}

        tucked = sum(bird.tucked_cards for player in state.players for bird in player.board)
        assert state.total_bird_cards() + tucked == len(engine.content.birds())
        assert state.revealed_cards == []
        for player in state.players:
            for bird in player.board:
                assert 0 <= bird.eggs <= bird.card.egg_capacity
            assert all(count >= 0 for count in player.food.values())

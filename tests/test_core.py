"""Tests for the core module (random sources, decks, feeder, cards, boards, players, state)."""

import json
import logging
import sys

import pytest

from core.birdfeeder import Birdfeeder, die_provides
from core.board import BirdInstance, PlayerBoard, make_bird_instance_id
from core.card_supply import BirdCardSupply
from core.cards import BonusTrade, HabitatRewards, PlayerBoardConfig
from core.constants import (
    BonusScoringType,
    DieFace,
    FoodCostMode,
    FoodType,
    Habitat,
    NestType,
    PowerTrigger,
    Resource,
    DIE_FACES,
    FEEDER_CAPACITY,
    HABITAT_SIZE,
    TRAY_SIZE,
)
from core.deck import Deck
from core.errors import DeckExhaustedError, RandomSourceExhaustedError
from core.game_state import GameState
from core.logging_config import JsonFormatter
from core.player import PlayerState, payment_error
from core.rng import PresetRandom, SeededRandom

from scenario import build_state, filler_birds, make_bird, make_bonus, make_power, place_bird


# =============================================================================
# Random Sources
# =============================================================================

class TestRandomSources:
    """Test the deterministic random sources."""

    def test_seeded_random_is_reproducible(self):
        """Two sources with the same seed should produce the same draws."""
        a, b = SeededRandom(42), SeededRandom(42)
        assert [a.randint(0, 100) for _ in range(20)] == [b.randint(0, 100) for _ in range(20)]

    def test_seeded_random_shuffle_is_reproducible(self):
        """Shuffles with the same seed should agree and keep every item."""
        items = list(range(30))
        first = SeededRandom(7).shuffle(items)
        assert first == SeededRandom(7).shuffle(items)
        assert sorted(first) == items

    def test_seeded_random_rejects_empty_range(self):
        """randint needs high > low."""
        with pytest.raises(ValueError):
            SeededRandom(1).randint(3, 3)

    def test_preset_random_returns_values_in_order(self):
        """PresetRandom should replay its values."""
        rng = PresetRandom([2, 0, 1])
        assert [rng.randint(0, 3) for _ in range(3)] == [2, 0, 1]
        assert rng.remaining == 0

    def test_preset_random_exhausted(self):
        """Running out of values should raise."""
        rng = PresetRandom([1])
        rng.randint(0, 2)
        with pytest.raises(RandomSourceExhaustedError):
            rng.randint(0, 2)

    def test_preset_random_cycles(self):
        """With cycle=True the values start over."""
        rng = PresetRandom([1, 2], cycle=True)
        assert [rng.randint(0, 3) for _ in range(5)] == [1, 2, 1, 2, 1]

    def test_preset_random_rejects_out_of_range_value(self):
        """A preset value outside the requested range is a test bug."""
        with pytest.raises(ValueError):
            PresetRandom([6]).randint(0, 6)

    def test_preset_random_shuffle_is_identity(self):
        """PresetRandom shuffles keep the given order."""
        assert PresetRandom().shuffle([3, 1, 2]) == [3, 1, 2]

    def test_sample_larger_than_population(self):
        """Sampling more items than exist should raise."""
        with pytest.raises(ValueError):
            SeededRandom(0).sample([1, 2], 3)

    def test_choice_on_empty_sequence(self):
        """Choosing from nothing should raise."""
        with pytest.raises(ValueError):
            SeededRandom(0).choice([])


# =============================================================================
# Deck
# =============================================================================

class TestDeck:
    """Test the generic draw pile."""

    def test_draw_from_top(self):
        """Cards should come off the front of the draw pile."""
        deck = Deck(["a", "b", "c"], PresetRandom())
        assert deck.draw(2) == ["a", "b"]
        assert deck.deck_size == 1

    def test_reshuffles_discards_when_short(self):
        """A short draw pile takes the discard pile back in."""
        deck = Deck(["a", "b"], PresetRandom())
        deck.discard(["c", "d"])
        assert deck.draw(3) == ["a", "b", "c"]
        assert deck.discard_size == 0
        assert deck.deck_size == 1

    def test_exhausted_moves_nothing(self):
        """Asking for more than exists raises and leaves both piles alone."""
        deck = Deck(["a"], PresetRandom())
        deck.discard(["b"])
        with pytest.raises(DeckExhaustedError) as excinfo:
            deck.draw(3)
        assert excinfo.value.requested == 3
        assert excinfo.value.available == 2
        assert deck.deck_size == 1
        assert deck.discard_size == 1

    def test_negative_draw(self):
        """Negative draws are rejected."""
        with pytest.raises(ValueError):
            Deck(["a"], PresetRandom()).draw(-1)

    def test_available_counts_discards(self):
        """available includes the discard pile."""
        deck = Deck(["a", "b"], PresetRandom())
        deck.discard(["c"])
        assert deck.available == 3
        assert len(deck) == 2

    def test_full_cycle_then_draw(self):
        """A deck drawn out and discarded back is reshuffled on the next draw."""
        deck = Deck(["a", "b", "c", "d", "e"], PresetRandom())
        deck.discard(deck.draw(5))
        assert (deck.deck_size, deck.discard_size) == (0, 5)

        drawn = deck.draw(2)

        assert drawn == ["a", "b"]
        assert deck.deck_size == 3
        assert deck.discard_size == 0

    def test_peek_does_not_draw(self):
        """peek leaves the cards in place."""
        deck = Deck(["a", "b", "c"], PresetRandom())
        assert deck.peek(2) == ["a", "b"]
        assert deck.deck_size == 3

    def test_unshuffled_deck_keeps_order(self):
        """shuffle=False should not consult the random source."""
        deck = Deck(["x", "y"], PresetRandom(), shuffle=False)
        assert deck.draw(2) == ["x", "y"]


# =============================================================================
# Birdfeeder
# =============================================================================

class TestBirdfeeder:
    """Test the dice pool."""

    def test_rolls_full_feeder_when_no_dice_given(self):
        """A new feeder without explicit dice rolls FEEDER_CAPACITY dice."""
        feeder = Birdfeeder(PresetRandom([0, 1, 2, 3, 5]))
        assert feeder.dice == [DIE_FACES[0], DIE_FACES[1], DIE_FACES[2], DIE_FACES[3], DIE_FACES[5]]

    def test_too_many_dice(self):
        """More dice than the feeder holds is rejected."""
        with pytest.raises(ValueError):
            Birdfeeder(PresetRandom(), [DieFace.SEED] * (FEEDER_CAPACITY + 1))

    def test_take_die(self):
        """Taking a die removes exactly one die of that face."""
        feeder = Birdfeeder(PresetRandom(), [DieFace.SEED, DieFace.SEED, DieFace.FISH])
        feeder.take_die(DieFace.SEED)
        assert feeder.dice == [DieFace.SEED, DieFace.FISH]

    def test_take_missing_die(self):
        """Taking a face that is not showing raises."""
        feeder = Birdfeeder(PresetRandom(), [DieFace.FISH])
        with pytest.raises(ValueError):
            feeder.take_die(DieFace.RODENT)

    def test_available_dice_omits_empty_faces(self):
        """available_dice counts only faces that are showing."""
        feeder = Birdfeeder(PresetRandom(), [DieFace.FISH, DieFace.FISH, DieFace.RODENT])
        assert feeder.available_dice() == {DieFace.FISH: 2, DieFace.RODENT: 1}

    def test_dual_face_provides_both_foods(self):
        """The seed/invertebrate face counts for seed and for invertebrate."""
        feeder = Birdfeeder(PresetRandom(), [DieFace.SEED_INVERTEBRATE, DieFace.SEED])
        assert feeder.count_providing(FoodType.SEED) == 2
        assert feeder.count_providing(FoodType.INVERTEBRATE) == 1
        assert die_provides(DieFace.SEED_INVERTEBRATE, FoodType.INVERTEBRATE)
        assert not die_provides(DieFace.FISH, FoodType.SEED)

    def test_can_reroll_only_when_all_same(self):
        """Rerolling requires every remaining die to show one face."""
        assert Birdfeeder(PresetRandom(), [DieFace.FISH, DieFace.FISH]).can_reroll()
        assert not Birdfeeder(PresetRandom(), [DieFace.FISH, DieFace.SEED]).can_reroll()
        assert not Birdfeeder(PresetRandom(), []).can_reroll()

    def test_reroll_all_rolls_full_set(self):
        """A reroll brings the feeder back to capacity."""
        feeder = Birdfeeder(PresetRandom([4, 4, 4, 4, 2]), [DieFace.FISH])
        assert feeder.reroll_all() == [DieFace.RODENT] * 4 + [DieFace.FISH]
        assert len(feeder) == FEEDER_CAPACITY

    def test_reroll_not_allowed(self):
        """Rerolling a mixed feeder raises."""
        feeder = Birdfeeder(PresetRandom([0] * 5), [DieFace.FISH, DieFace.SEED])
        with pytest.raises(ValueError):
            feeder.reroll_all()

    def test_refill_requires_empty_feeder(self):
        """refill only works on an empty feeder."""
        with pytest.raises(ValueError):
            Birdfeeder(PresetRandom([0] * 5), [DieFace.FISH]).refill()
        feeder = Birdfeeder(PresetRandom([1] * 5), [])
        assert feeder.refill() == [DieFace.SEED] * 5

    def test_roll_outside_does_not_change_feeder(self):
        """Dice outside the feeder are rolled without being added."""
        feeder = Birdfeeder(PresetRandom([4, 2]), [DieFace.FISH, DieFace.SEED, DieFace.FRUIT])
        assert feeder.roll_outside() == [DieFace.RODENT, DieFace.FISH]
        assert len(feeder) == 3


# =============================================================================
# Cards and Board Config
# =============================================================================

class TestCards:
    """Test card definitions."""

    def test_tiered_bonus_scores_highest_tier(self):
        """Tiered bonus cards score the highest tier reached."""
        card = make_bonus("b", BonusScoringType.TIERED, tiers=[(2, 3), (4, 7)])
        assert card.score(1) == 0
        assert card.score(3) == 3
        assert card.score(6) == 7

    def test_per_bird_bonus(self):
        """Per-bird bonus cards multiply the count."""
        assert make_bonus("b", points_per_bird=2).score(3) == 6

    def test_wild_nest_matches_everything(self):
        """A wild nest counts as every nest type."""
        wild = make_bird("w", nest_type=NestType.WILD)
        bowl = make_bird("b", nest_type=NestType.BOWL)
        assert wild.has_nest(NestType.CAVITY)
        assert bowl.has_nest(NestType.BOWL)
        assert not bowl.has_nest(NestType.GROUND)

    def test_trigger_of_vanilla_bird(self):
        """Birds without a power have no trigger."""
        assert make_bird("v").trigger is None
        pink = make_bird("p", power=make_power("x", PowerTrigger.ONCE_BETWEEN_TURNS))
        assert pink.trigger == PowerTrigger.ONCE_BETWEEN_TURNS

    def test_power_params_do_not_affect_equality(self):
        """Power parameters are excluded from hashing and comparison."""
        assert make_power("x", food="fish") == make_power("x", food="seed")
        hash(make_bird("h", power=make_power("x", food="fish")))

    def test_habitat_rewards_need_six_columns(self):
        """Rewards are indexed by leftmost empty column, 0 to 5."""
        with pytest.raises(ValueError):
            HabitatRewards(base=(1, 1, 2), bonus=(None, None, None))

    def test_standard_board(self):
        """The printed board rewards, trades and egg costs."""
        board = PlayerBoardConfig.standard()
        assert board.forest.base == (1, 1, 2, 2, 3, 3)
        assert board.grassland.base == (2, 2, 3, 3, 4, 4)
        assert board.wetland.base == (1, 1, 2, 2, 3, 3)
        assert board.forest.bonus_at(1) == BonusTrade(pay=Resource.CARD)
        assert board.grassland.bonus_at(3) == BonusTrade(pay=Resource.FOOD)
        assert board.wetland.bonus_at(5) == BonusTrade(pay=Resource.EGG)
        assert board.forest.bonus_at(0) is None
        assert [board.egg_cost(c) for c in range(HABITAT_SIZE)] == [0, 1, 1, 2, 2]
        assert board.rewards_for(Habitat.GRASSLAND) is board.grassland


# =============================================================================
# Player Board
# =============================================================================

def _instance(card_id, **kwargs) -> BirdInstance:
    return BirdInstance(instance_id=make_bird_instance_id("p1", card_id), card=make_bird(card_id, **kwargs))


class TestPlayerBoard:
    """Test habitat rows."""

    def test_instance_ids(self):
        """Instance ids combine player and card."""
        assert make_bird_instance_id("p1", "owl") == "p1_owl"

    def test_place_bird_returns_column(self):
        """Birds fill a row from the left."""
        board = PlayerBoard()
        assert board.place_bird(_instance("a"), Habitat.FOREST) == 0
        assert board.place_bird(_instance("b"), Habitat.FOREST) == 1
        assert board.leftmost_empty_column(Habitat.FOREST) == 2
        assert board.column_of("p1_b") == 1
        assert board.habitat_of("p1_b") == Habitat.FOREST

    def test_full_row(self):
        """A sixth bird does not fit."""
        board = PlayerBoard()
        for i in range(HABITAT_SIZE):
            board.place_bird(_instance(f"b{i}"), Habitat.WETLAND)
        assert not board.has_space(Habitat.WETLAND)
        with pytest.raises(ValueError):
            board.place_bird(_instance("extra"), Habitat.WETLAND)

    def test_same_bird_twice(self):
        """A bird instance can only be on the board once."""
        board = PlayerBoard()
        bird = _instance("a")
        board.place_bird(bird, Habitat.FOREST)
        with pytest.raises(ValueError):
            board.place_bird(bird, Habitat.GRASSLAND)

    def test_remove_keeps_row_contiguous(self):
        """Removing a bird shifts the birds to its right."""
        board = PlayerBoard()
        for card_id in ("a", "b", "c"):
            board.place_bird(_instance(card_id), Habitat.FOREST)
        board.remove_bird("p1_a")
        assert [b.card.id for b in board.birds_in_habitat(Habitat.FOREST)] == ["b", "c"]
        assert board.column_of("p1_c") == 1
        with pytest.raises(ValueError):
            board.remove_bird("p1_a")

    def test_brown_power_birds_right_to_left(self):
        """Brown powers activate from the rightmost bird."""
        board = PlayerBoard()
        board.place_bird(_instance("a", power=make_power("drawCards")), Habitat.FOREST)
        board.place_bird(_instance("b", power=make_power("x", PowerTrigger.WHEN_PLAYED)), Habitat.FOREST)
        board.place_bird(_instance("c", power=make_power("drawCards")), Habitat.FOREST)
        assert [b.card.id for b in board.brown_power_birds(Habitat.FOREST)] == ["c", "a"]

    def test_is_rightmost(self):
        board = PlayerBoard()
        board.place_bird(_instance("a"), Habitat.FOREST)
        board.place_bird(_instance("b"), Habitat.FOREST)
        assert board.is_rightmost("p1_b")
        assert not board.is_rightmost("p1_a")
        assert not board.is_rightmost("p1_missing")

    def test_egg_capacity(self):
        """Eggs never exceed a bird's capacity."""
        bird = _instance("a", egg_capacity=2)
        bird.lay_eggs(2)
        with pytest.raises(ValueError):
            bird.lay_eggs(1)
        with pytest.raises(ValueError):
            bird.remove_eggs(3)
        assert bird.remaining_egg_capacity == 0

    def test_egg_queries(self):
        """Capacity and egg maps only list birds with something to offer."""
        board = PlayerBoard()
        full = _instance("full", egg_capacity=1)
        full.lay_eggs(1)
        empty = _instance("empty", egg_capacity=3)
        board.place_bird(full, Habitat.FOREST)
        board.place_bird(empty, Habitat.WETLAND)
        assert board.remaining_egg_capacities() == {"p1_empty": 3}
        assert board.eggs_on_birds() == {"p1_full": 1}
        assert board.total_eggs() == 1
        assert board.total_remaining_egg_capacity() == 3

    def test_cannot_cache_wild(self):
        with pytest.raises(ValueError):
            _instance("a").cache_food(FoodType.WILD)

    def test_birds_with_nest_type_counts_wild(self):
        board = PlayerBoard()
        board.place_bird(_instance("g", nest_type=NestType.GROUND), Habitat.FOREST)
        board.place_bird(_instance("w", nest_type=NestType.WILD), Habitat.FOREST)
        board.place_bird(_instance("c", nest_type=NestType.CAVITY), Habitat.FOREST)
        assert [b.card.id for b in board.birds_with_nest_type(NestType.GROUND)] == ["g", "w"]


# =============================================================================
# Player
# =============================================================================

class TestPayment:
    """Test food payments against bird costs."""

    def test_and_cost_exact(self):
        card = make_bird("a", food_cost=(FoodType.SEED, FoodType.FISH))
        assert payment_error(card, {FoodType.SEED: 1, FoodType.FISH: 1}) is None
        assert payment_error(card, {FoodType.SEED: 2}) is not None
        assert payment_error(card, {FoodType.SEED: 1, FoodType.FISH: 1, FoodType.FRUIT: 1}) is not None

    def test_and_cost_with_wild(self):
        """Wild cost entries accept any real food."""
        card = make_bird("a", food_cost=(FoodType.RODENT, FoodType.WILD))
        assert payment_error(card, {FoodType.RODENT: 1, FoodType.FRUIT: 1}) is None
        assert payment_error(card, {FoodType.RODENT: 2}) is None
        assert payment_error(card, {FoodType.FRUIT: 2}) is not None

    def test_cannot_pay_with_wild(self):
        card = make_bird("a", food_cost=(FoodType.WILD,))
        assert payment_error(card, {FoodType.WILD: 1}) is not None

    def test_or_cost(self):
        """OR costs take exactly one of the listed foods."""
        card = make_bird("a", food_cost=(FoodType.FISH, FoodType.RODENT), food_cost_mode=FoodCostMode.OR)
        assert payment_error(card, {FoodType.RODENT: 1}) is None
        assert payment_error(card, {FoodType.SEED: 1}) is not None
        assert payment_error(card, {FoodType.FISH: 1, FoodType.RODENT: 1}) is not None

    def test_free_bird(self):
        card = make_bird("a", food_cost=(), food_cost_mode=FoodCostMode.NONE)
        assert payment_error(card, {}) is None
        assert payment_error(card, {FoodType.SEED: 1}) is not None

    def test_negative_amounts(self):
        card = make_bird("a")
        assert payment_error(card, {FoodType.SEED: 2, FoodType.FISH: -1}) is not None


class TestPlayerState:
    """Test player food, hand and play eligibility."""

    def test_initial_food_supply(self):
        player = PlayerState(player_id="p1")
        assert player.total_food() == 0
        assert FoodType.WILD not in player.food

    def test_spend_food(self):
        player = PlayerState(player_id="p1")
        player.gain_food(FoodType.FISH, 2)
        player.spend_food({FoodType.FISH: 1})
        assert player.food[FoodType.FISH] == 1
        with pytest.raises(ValueError):
            player.spend_food({FoodType.FISH: 2})

    def test_gain_wild_food(self):
        with pytest.raises(ValueError):
            PlayerState(player_id="p1").gain_food(FoodType.WILD)

    def test_remove_from_hand_is_all_or_nothing(self):
        """A missing card leaves the hand untouched."""
        player = PlayerState(player_id="p1", hand=filler_birds(2))
        with pytest.raises(ValueError):
            player.remove_from_hand(["filler_0", "missing"])
        assert player.hand_ids == ["filler_0", "filler_1"]
        assert [c.id for c in player.remove_from_hand(["filler_1"])] == ["filler_1"]
        assert player.hand_ids == ["filler_0"]

    def test_can_afford(self):
        player = PlayerState(player_id="p1")
        player.gain_food(FoodType.SEED)
        assert player.can_afford(make_bird("a", food_cost=(FoodType.SEED,)))
        assert not player.can_afford(make_bird("b", food_cost=(FoodType.SEED, FoodType.WILD)))
        player.gain_food(FoodType.FISH)
        assert player.can_afford(make_bird("b", food_cost=(FoodType.SEED, FoodType.WILD)))
        assert player.can_afford(make_bird("c", food_cost=(FoodType.WILD,), food_cost_mode=FoodCostMode.OR))

    def test_eligible_birds_respect_egg_cost(self):
        """The second column of a row costs an egg."""
        config = PlayerBoardConfig.standard()
        forest_only = make_bird("f", habitats=(Habitat.FOREST,), food_cost=(), food_cost_mode=FoodCostMode.NONE)
        player = PlayerState(player_id="p1", hand=[forest_only])
        player.board.place_bird(_instance("first"), Habitat.FOREST)
        assert player.eligible_birds_to_play(config) == []
        player.board.find_bird("p1_first").lay_eggs(1)
        assert player.eligible_birds_to_play(config) == [forest_only]
        assert player.playable_habitats(forest_only, config) == [Habitat.FOREST]
        assert player.eligible_birds_to_play(config, Habitat.WETLAND) == []


# =============================================================================
# Card Supply and Game State
# =============================================================================

class TestBirdCardSupply:
    """Test the tray and deck together."""

    def test_refill_tray(self):
        supply = BirdCardSupply(Deck(filler_birds(5), PresetRandom()))
        added = supply.refill_tray()
        assert [c.id for c in added] == ["filler_0", "filler_1", "filler_2"]
        supply.take_from_tray("filler_1")
        supply.refill_tray()
        assert supply.tray_ids() == ["filler_0", "filler_2", "filler_3"]

    def test_refill_with_short_deck(self):
        """The tray fills as far as the deck allows."""
        supply = BirdCardSupply(Deck(filler_birds(2), PresetRandom()))
        supply.refill_tray()
        assert len(supply.tray_cards()) == 2
        assert supply.available == 0

    def test_take_missing_card(self):
        supply = BirdCardSupply(Deck(filler_birds(3), PresetRandom()))
        with pytest.raises(ValueError):
            supply.take_from_tray("filler_0")

    def test_tray_limit(self):
        with pytest.raises(ValueError):
            BirdCardSupply(Deck([], PresetRandom()), filler_birds(TRAY_SIZE + 1))


class TestGameState:
    """Test GameState creation and lookups."""

    def test_create(self):
        """A new state has a full tray and nothing dealt."""
        state = build_state()
        assert state.player_ids == ["alice", "bob"]
        assert state.bird_supply.tray_ids() == ["filler_0", "filler_1", "filler_2"]
        assert state.bird_supply.available == 9
        assert state.round == 0
        assert state.turn == 1
        assert all(not p.hand and p.total_food() == 0 for p in state.players)

    def test_player_count_limits(self):
        with pytest.raises(ValueError):
            build_state(player_ids=[])
        with pytest.raises(ValueError):
            build_state(player_ids=[f"p{i}" for i in range(6)])

    def test_duplicate_player_ids(self):
        with pytest.raises(ValueError):
            build_state(player_ids=["a", "a"])

    def test_get_unknown_player(self):
        with pytest.raises(ValueError):
            build_state().get_player("carol")

    def test_clockwise_order(self):
        """Clockwise order starts after the given player and wraps."""
        state = build_state(player_ids=["a", "b", "c"])
        assert [p.player_id for p in state.clockwise_order("b")] == ["c", "a"]
        assert [p.player_id for p in state.clockwise_from("c")] == ["c", "a", "b"]

    def test_active_player_ids_skip_forfeited(self):
        state = build_state(player_ids=["a", "b", "c"])
        state.get_player("b").forfeited = True
        assert state.active_player_ids() == ["a", "c"]

    def test_find_bird_and_owner(self):
        state = build_state()
        bird = place_bird(state, "bob", make_bird("owl"), Habitat.FOREST)
        assert state.find_bird("bob_owl") is bird
        assert state.find_bird_owner("bob_owl").player_id == "bob"
        assert state.find_bird("alice_owl") is None

    def test_revealed_card_lookup(self):
        state = build_state()
        with pytest.raises(ValueError):
            state.revealed_card("filler_5")
        with pytest.raises(ValueError):
            state.revealed_bonus_card("bonus_0")

    def test_total_bird_cards(self):
        """Every untucked bird card is counted exactly once."""
        state = build_state()
        state.get_player("alice").hand.extend(state.bird_supply.draw_from_deck(2))
        state.bird_supply.discard(state.bird_supply.draw_from_deck(1))
        assert state.total_bird_cards() == 12

    def test_create_rolls_feeder_without_dice(self):
        """Without explicit dice the feeder is rolled from the state's source."""
        state = GameState.create(["a"], filler_birds(3), [], PresetRandom([0, 0, 0, 0, 0]))
        assert state.birdfeeder.dice == [DieFace.INVERTEBRATE] * 5


# =============================================================================
# Logging
# =============================================================================

class TestJsonFormatter:
    """Test JSON log lines."""

    def test_quotes_in_message_stay_valid_json(self):
        record = logging.LogRecord(
            "engine.decisions", logging.WARNING, __file__, 1, "Rejected %r: %s", ("prompt_3", 'say "hi"'), None
        )
        entry = json.loads(JsonFormatter().format(record))
        assert entry["level"] == "WARNING"
        assert entry["name"] == "engine.decisions"
        assert entry["message"] == "Rejected 'prompt_3': say \"hi\""

    def test_exception_included(self):
        try:
            raise ValueError("bad egg")
        except ValueError:
            record = logging.LogRecord("sim", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
        entry = json.loads(JsonFormatter().format(record))
        assert "ValueError: bad egg" in entry["exception"]

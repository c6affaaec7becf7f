"""Tests for end-of-game scoring."""

import pytest

from core.constants import BonusScoringType, FoodType, Habitat

from engine.scoring import ScoreBreakdown, bonus_matches, determine_winner, score_game, score_player

from scenario import build_state, make_bird, make_bonus, place_bird


@pytest.fixture
def state():
    return build_state()


class TestScorePlayer:
    """Test the score categories of one player."""

    def test_empty_board(self, state):
        assert score_player(state.get_player("alice")) == ScoreBreakdown()

    def test_board_categories(self, state):
        place_bird(state, "alice", make_bird("heron", victory_points=5), Habitat.WETLAND, eggs=2)
        jay = place_bird(state, "alice", make_bird("jay", victory_points=3), Habitat.FOREST)
        jay.cache_food(FoodType.SEED, 2)
        jay.tuck(3)

        breakdown = score_player(state.get_player("alice"))

        assert breakdown == ScoreBreakdown(bird_points=8, eggs=2, cached_food=2, tucked_cards=3, bonus_cards=0)
        assert breakdown.total == 15

    def test_food_in_supply_scores_nothing(self, state):
        state.get_player("alice").gain_food(FoodType.FISH, 4)
        assert score_player(state.get_player("alice")).total == 0

    def test_per_bird_bonus(self, state):
        alice = state.get_player("alice")
        alice.bonus_cards.append(make_bonus("anatomist", points_per_bird=2))
        place_bird(state, "alice", make_bird("a", bonus_cards=["anatomist"]), Habitat.FOREST)
        place_bird(state, "alice", make_bird("b", bonus_cards=["anatomist"]), Habitat.FOREST)
        place_bird(state, "alice", make_bird("c"), Habitat.FOREST)
        assert score_player(alice).bonus_cards == 4

    def test_tiered_bonus(self, state):
        alice = state.get_player("alice")
        alice.bonus_cards.append(
            make_bonus("photographer", BonusScoringType.TIERED, tiers=[(2, 3), (4, 7)])
        )
        for name in "abc":
            place_bird(state, "alice", make_bird(name, bonus_cards=["photographer"]), Habitat.GRASSLAND)
        assert score_player(alice).bonus_cards == 3


class TestBonusMatches:
    """Test bonus cards judged from the final position."""

    def test_breeding_manager(self, state):
        alice = state.get_player("alice")
        place_bird(state, "alice", make_bird("a", egg_capacity=5), Habitat.FOREST, eggs=4)
        place_bird(state, "alice", make_bird("b"), Habitat.FOREST, eggs=3)
        assert bonus_matches(alice, make_bonus("breeding_manager")) == 1

    def test_oologist(self, state):
        alice = state.get_player("alice")
        place_bird(state, "alice", make_bird("a"), Habitat.FOREST, eggs=1)
        place_bird(state, "alice", make_bird("b"), Habitat.FOREST)
        assert bonus_matches(alice, make_bonus("oologist")) == 1

    def test_visionary_leader(self, state):
        alice = state.get_player("alice")
        alice.hand.extend(state.bird_supply.draw_from_deck(3))
        assert bonus_matches(alice, make_bonus("visionary_leader")) == 3

    def test_ecologist(self, state):
        """Counts birds in the habitat with the fewest birds."""
        alice = state.get_player("alice")
        place_bird(state, "alice", make_bird("a"), Habitat.FOREST)
        place_bird(state, "alice", make_bird("b"), Habitat.GRASSLAND)
        place_bird(state, "alice", make_bird("c"), Habitat.GRASSLAND)
        assert bonus_matches(alice, make_bonus("ecologist")) == 0
        place_bird(state, "alice", make_bird("d"), Habitat.WETLAND)
        assert bonus_matches(alice, make_bonus("ecologist")) == 1

    def test_printed_bonus_ids(self, state):
        alice = state.get_player("alice")
        place_bird(state, "alice", make_bird("a", bonus_cards=["falconer"]), Habitat.FOREST)
        assert bonus_matches(alice, make_bonus("falconer")) == 1
        assert bonus_matches(alice, make_bonus("cartographer")) == 0


class TestWinner:
    """Test the winner rules."""

    def test_scores_for_every_player(self, state):
        assert set(score_game(state)) == {"alice", "bob"}

    def test_highest_score_wins(self, state):
        assert determine_winner(state, {"alice": 10, "bob": 12}) == "bob"

    def test_earlier_seat_wins_tie(self, state):
        assert determine_winner(state, {"alice": 12, "bob": 12}) == "alice"

    def test_forfeited_player_cannot_win(self, state):
        state.get_player("bob").forfeited = True
        assert determine_winner(state, {"alice": 1, "bob": 50}) == "alice"

    def test_no_winner_when_all_forfeit(self, state):
        for player in state.players:
            player.forfeited = True
        assert determine_winner(state, {"alice": 1, "bob": 2}) is None

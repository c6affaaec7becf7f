"""Built-in turn-action and bird power handlers.

Each module groups handlers by theme. register_all() wires every one of
them into a HandlerRegistry under the handler id used by card content.
"""

from core.constants import TurnActionKind

from .food import (
    gain_food_from_supply,
    cache_food_from_supply,
    gain_food_from_feeder,
    gain_food_from_feeder_with_cache,
    gain_food_from_feeder_if_available,
    gain_all_food_type_from_feeder,
    trade_food_type,
    discard_egg_to_gain_food,
)
from .eggs import lay_eggs_on_bird, lay_egg_on_birds_with_nest_type
from .cards import (
    draw_cards,
    draw_face_up_cards_from_tray,
    draw_cards_with_delayed_discard,
    draw_and_distribute_cards,
    draw_bonus_cards_and_keep,
    discard_egg_to_draw_cards,
)
from .tuck import (
    tuck_and_draw,
    tuck_from_hand_and_lay,
    tuck_and_gain_food,
    tuck_and_gain_food_of_choice,
    discard_food_to_tuck_from_deck,
)
from .predator import (
    PREDATOR_HANDLER_IDS,
    roll_dice_and_cache_if_match,
    look_at_card_and_tuck_if_wingspan_under,
)
from .multiplayer import (
    all_players_gain_food_from_supply,
    all_players_draw_cards_from_deck,
    all_players_lay_egg_on_nest_type,
    each_player_gains_food_from_feeder,
    players_with_fewest_in_habitat_draw_card,
    players_with_fewest_in_habitat_gain_food,
)
from .special import (
    REPEAT_HANDLER_IDS,
    move_to_another_habitat_if_rightmost,
    play_additional_bird_in_habitat,
    repeat_brown_power_in_habitat,
    repeat_predator_power_in_habitat,
)
from .pink import (
    OPPONENT_LAYS_EGGS,
    OPPONENT_PLAYS_BIRD_IN_HABITAT,
    OPPONENT_PREDATOR_SUCCEEDS,
    OPPONENT_GAINS_FOOD,
    when_opponent_lays_eggs_lay_egg_on_nest_type,
    when_opponent_plays_bird_in_habitat_gain_food,
    when_opponent_plays_bird_in_habitat_tuck_card,
    when_opponent_predator_succeeds_gain_food,
    when_opponent_gains_food_cache_if_match,
)
from .turn_actions import TURN_ACTION_HANDLERS, eligible_actions, action_rewards

# Handler id (as used in card content) -> handler
POWER_HANDLERS = {
    # Food
    "gainFoodFromSupply": gain_food_from_supply,
    "cacheFoodFromSupply": cache_food_from_supply,
    "gainFoodFromFeeder": gain_food_from_feeder,
    "gainFoodFromFeederWithCache": gain_food_from_feeder_with_cache,
    "gainFoodFromFeederIfAvailable": gain_food_from_feeder_if_available,
    "gainAllFoodTypeFromFeeder": gain_all_food_type_from_feeder,
    "tradeFoodType": trade_food_type,
    "discardEggToGainFood": discard_egg_to_gain_food,
    # Eggs
    "layEggsOnBird": lay_eggs_on_bird,
    "layEggOnBirdsWithNestType": lay_egg_on_birds_with_nest_type,
    # Cards
    "drawCards": draw_cards,
    "drawFaceUpCardsFromTray": draw_face_up_cards_from_tray,
    "drawCardsWithDelayedDiscard": draw_cards_with_delayed_discard,
    "drawAndDistributeCards": draw_and_distribute_cards,
    "drawBonusCardsAndKeep": draw_bonus_cards_and_keep,
    "discardEggToDrawCards": discard_egg_to_draw_cards,
    # Tuck
    "tuckAndDraw": tuck_and_draw,
    "tuckFromHandAndLay": tuck_from_hand_and_lay,
    "tuckAndGainFood": tuck_and_gain_food,
    "tuckAndGainFoodOfChoice": tuck_and_gain_food_of_choice,
    "discardFoodToTuckFromDeck": discard_food_to_tuck_from_deck,
    # Predators
    "rollDiceAndCacheIfMatch": roll_dice_and_cache_if_match,
    "lookAtCardAndTuckIfWingspanUnder": look_at_card_and_tuck_if_wingspan_under,
    # Several players
    "allPlayersGainFoodFromSupply": all_players_gain_food_from_supply,
    "allPlayersDrawCardsFromDeck": all_players_draw_cards_from_deck,
    "allPlayersLayEggOnNestType": all_players_lay_egg_on_nest_type,
    "eachPlayerGainsFoodFromFeeder": each_player_gains_food_from_feeder,
    "playersWithFewestInHabitatDrawCard": players_with_fewest_in_habitat_draw_card,
    "playersWithFewestInHabitatGainFood": players_with_fewest_in_habitat_gain_food,
    # Special
    "moveToAnotherHabitatIfRightmost": move_to_another_habitat_if_rightmost,
    "playAdditionalBirdInHabitat": play_additional_bird_in_habitat,
    "repeatBrownPowerInHabitat": repeat_brown_power_in_habitat,
    "repeatPredatorPowerInHabitat": repeat_predator_power_in_habitat,
}

# Pink handler id -> (handler, trigger rule)
PINK_HANDLERS = {
    "whenOpponentLaysEggsLayEggOnNestType": (when_opponent_lays_eggs_lay_egg_on_nest_type, OPPONENT_LAYS_EGGS),
    "whenOpponentPlaysBirdInHabitatGainFood": (
        when_opponent_plays_bird_in_habitat_gain_food,
        OPPONENT_PLAYS_BIRD_IN_HABITAT,
    ),
    "whenOpponentPlaysBirdInHabitatTuckCard": (
        when_opponent_plays_bird_in_habitat_tuck_card,
        OPPONENT_PLAYS_BIRD_IN_HABITAT,
    ),
    "whenOpponentPredatorSucceedsGainFood": (when_opponent_predator_succeeds_gain_food, OPPONENT_PREDATOR_SUCCEEDS),
    "whenOpponentGainsFoodCacheIfMatch": (when_opponent_gains_food_cache_if_match, OPPONENT_GAINS_FOOD),
}


def register_all(registry) -> None:
    """Register every built-in handler."""
    for action, handler in TURN_ACTION_HANDLERS.items():
        registry.register_turn_action(action, handler)
    for handler_id, handler in POWER_HANDLERS.items():
        registry.register_power(handler_id, handler)
    for handler_id, (handler, trigger) in PINK_HANDLERS.items():
        registry.register_power(handler_id, handler, pink_trigger=trigger)


__all__ = [
    "POWER_HANDLERS",
    "PINK_HANDLERS",
    "PREDATOR_HANDLER_IDS",
    "REPEAT_HANDLER_IDS",
    "TURN_ACTION_HANDLERS",
    "TurnActionKind",
    "eligible_actions",
    "action_rewards",
    "register_all",
]

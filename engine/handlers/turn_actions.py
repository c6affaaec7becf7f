"""Turn-action handlers: play a bird, gain food, lay eggs, draw cards.

The three habitat actions pay out the reward of the leftmost empty column
of their row, optionally boosted by that column's bonus trade, and then
activate the row (brown powers right to left).
"""

from __future__ import annotations

from core.constants import (
    CardSource,
    FoodType,
    Habitat,
    Resource,
    SelectCardsMode,
    TurnActionKind,
    HABITATS,
    HABITAT_FOR_ACTION,
)
from core.game_state import GameState
from core.player import PlayerState

from ..effects import (
    DiscardCardsEffect,
    DiscardEggsEffect,
    DiscardFoodEffect,
    DrawCardsEffect,
    LayEggsEffect,
    PlayBirdEffect,
    RefillBirdTrayEffect,
)
from ..events import (
    BirdPlayedEvent,
    EggsLaidFromHabitatActivationEvent,
    FoodGainedFromHabitatActivationEvent,
    HabitatActivatedEvent,
)
from ..power import HandlerContext, effect, event, prompt
from ..prompts import (
    ActionReward,
    DiscardEggsPrompt,
    DiscardFoodPrompt,
    DrawCardsPrompt,
    PlaceEggsPrompt,
    PlayBirdPrompt,
    SelectCardsPrompt,
)
from .helpers import Gen, select_food_from_feeder


# =============================================================================
# Eligibility and rewards
# =============================================================================


def can_pay(player: PlayerState, resource: Resource) -> bool:
    if resource == Resource.CARD:
        return bool(player.hand)
    if resource == Resource.FOOD:
        return player.total_food() > 0
    return player.board.total_eggs() > 0


def eligible_actions(state: GameState, player: PlayerState) -> list[TurnActionKind]:
    """Actions the player may take now.

    Gaining food and drawing cards are always possible; laying eggs needs
    room for an egg; playing a bird needs an affordable, placeable bird.
    """
    actions = []
    if player.can_play_any_bird(state.board_config):
        actions.append(TurnActionKind.PLAY_BIRD)
    actions.append(TurnActionKind.GAIN_FOOD)
    if player.board.total_remaining_egg_capacity() > 0:
        actions.append(TurnActionKind.LAY_EGGS)
    actions.append(TurnActionKind.DRAW_CARDS)
    return actions


def action_rewards(state: GameState, player: PlayerState) -> dict[TurnActionKind, ActionReward]:
    rewards = {TurnActionKind.PLAY_BIRD: ActionReward(reward=0)}
    for action, habitat in HABITAT_FOR_ACTION.items():
        column = player.board.leftmost_empty_column(habitat)
        row = state.board_config.rewards_for(habitat)
        bonus = row.bonus_at(column)
        rewards[action] = ActionReward(
            reward=row.reward_at(column),
            bonus=bonus,
            bonus_available=bonus is not None and can_pay(player, bonus.pay),
        )
    return rewards


def _bonus(ctx: HandlerContext, habitat: Habitat, take_bonus: bool) -> tuple[int, int]:
    """Base reward and bonus amount available for a habitat action."""
    row = ctx.state.board_config.rewards_for(habitat)
    column = ctx.player.board.leftmost_empty_column(habitat)
    bonus = row.bonus_at(column)
    extra = bonus.gain if take_bonus and bonus is not None and can_pay(ctx.player, bonus.pay) else 0
    return row.reward_at(column), extra


def _activate_habitat(ctx: HandlerContext, habitat: Habitat) -> Gen:
    brown = [bird.instance_id for bird in ctx.player.board.brown_power_birds(habitat)]
    yield from event(HabitatActivatedEvent(player_id=ctx.player_id, habitat=habitat, brown_birds=brown))


# =============================================================================
# Handlers
# =============================================================================


def play_bird(ctx: HandlerContext, take_bonus: bool = False) -> Gen:
    """Pay a bird's food and egg cost and place it in a habitat."""
    player = ctx.player
    config = ctx.state.board_config
    egg_costs = {
        habitat: config.egg_cost(player.board.leftmost_empty_column(habitat))
        for habitat in HABITATS
        if player.board.has_space(habitat)
    }
    choice = yield from prompt(
        PlayBirdPrompt(
            player_id=ctx.player_id,
            eligible_birds=tuple(player.eligible_birds_to_play(config)),
            egg_cost_by_habitat=egg_costs,
        )
    )
    played = yield from effect(
        PlayBirdEffect(
            player_id=ctx.player_id,
            card_id=choice.bird,
            habitat=choice.habitat,
            food_paid=dict(choice.food_to_spend),
            eggs_paid=dict(choice.eggs_to_spend),
        )
    )
    yield from event(
        BirdPlayedEvent(
            player_id=ctx.player_id,
            bird_instance_id=played.bird_instance_id,
            card_id=played.card_id,
            habitat=played.habitat,
        )
    )


def gain_food(ctx: HandlerContext, take_bonus: bool = False) -> Gen:
    """Take dice from the birdfeeder, then activate the forest."""
    reward, extra = _bonus(ctx, Habitat.FOREST, take_bonus)
    if extra:
        choice = yield from prompt(
            SelectCardsPrompt(
                player_id=ctx.player_id,
                mode=SelectCardsMode.DISCARD,
                source=CardSource.HAND,
                count=1,
                eligible_cards=tuple(ctx.player.hand),
            )
        )
        yield from effect(
            DiscardCardsEffect(player_id=ctx.player_id, card_ids=list(choice.cards), source=CardSource.HAND)
        )

    gained: dict[FoodType, int] = {}
    for _ in range(reward + extra):
        food = yield from select_food_from_feeder(ctx)
        if food is None:
            break
        gained[food] = gained.get(food, 0) + 1

    if gained:
        yield from event(FoodGainedFromHabitatActivationEvent(player_id=ctx.player_id, food=gained))
    yield from _activate_habitat(ctx, Habitat.FOREST)


def lay_eggs(ctx: HandlerContext, take_bonus: bool = False) -> Gen:
    """Lay eggs on birds with room, then activate the grassland."""
    reward, extra = _bonus(ctx, Habitat.GRASSLAND, take_bonus)
    if extra:
        choice = yield from prompt(
            DiscardFoodPrompt(
                player_id=ctx.player_id,
                food_cost={FoodType.WILD: 1},
                reward_text="Lay 1 extra egg",
            )
        )
        yield from effect(DiscardFoodEffect(player_id=ctx.player_id, food=dict(choice.food)))

    capacities = ctx.player.board.remaining_egg_capacities()
    count = min(reward + extra, sum(capacities.values()))
    if count > 0:
        choice = yield from prompt(
            PlaceEggsPrompt(player_id=ctx.player_id, count=count, remaining_capacity_by_bird=capacities)
        )
        yield from effect(LayEggsEffect(player_id=ctx.player_id, placements=dict(choice.placements)))

    yield from _activate_habitat(ctx, Habitat.GRASSLAND)
    yield from event(EggsLaidFromHabitatActivationEvent(player_id=ctx.player_id, count=count))


def draw_cards(ctx: HandlerContext, take_bonus: bool = False) -> Gen:
    """Draw from the tray and/or deck, then activate the wetland."""
    reward, extra = _bonus(ctx, Habitat.WETLAND, take_bonus)
    if extra:
        eggs = ctx.player.board.eggs_on_birds()
        choice = yield from prompt(
            DiscardEggsPrompt(player_id=ctx.player_id, count=1, eggs_by_eligible_bird=eggs)
        )
        yield from effect(DiscardEggsEffect(player_id=ctx.player_id, sources=dict(choice.sources)))

    supply = ctx.state.bird_supply
    remaining = min(reward + extra, supply.available + len(supply.tray_cards()))
    while remaining > 0:
        choice = yield from prompt(
            DrawCardsPrompt(
                player_id=ctx.player_id,
                remaining=remaining,
                tray_cards=tuple(supply.tray_cards()),
                deck_available=supply.available,
            )
        )
        drawn = yield from effect(
            DrawCardsEffect(
                player_id=ctx.player_id,
                from_tray=list(choice.tray_cards),
                from_deck=choice.deck_count,
            )
        )
        yield from effect(RefillBirdTrayEffect())
        remaining = min(remaining - drawn.total, supply.available + len(supply.tray_cards()))

    yield from _activate_habitat(ctx, Habitat.WETLAND)


TURN_ACTION_HANDLERS = {
    TurnActionKind.PLAY_BIRD: play_bird,
    TurnActionKind.GAIN_FOOD: gain_food,
    TurnActionKind.LAY_EGGS: lay_eggs,
    TurnActionKind.DRAW_CARDS: draw_cards,
}

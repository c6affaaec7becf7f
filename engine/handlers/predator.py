"""Predator powers. Each one emits PREDATOR_POWER_RESOLVED with its outcome."""

from __future__ import annotations

from core.birdfeeder import die_provides
from core.constants import CardSource, SkipReason, FEEDER_CAPACITY

from ..effects import CacheFoodEffect, DiscardCardsEffect, RevealCardsEffect, RollDiceEffect, TuckCardsEffect
from ..events import PredatorPowerResolvedEvent
from ..power import PowerContext, effect, event
from .helpers import Gen, ask_to_activate, food_param, skip

ROLL_DICE_AND_CACHE = "rollDiceAndCacheIfMatch"
LOOK_AT_CARD_AND_TUCK = "lookAtCardAndTuckIfWingspanUnder"

PREDATOR_HANDLER_IDS = frozenset({ROLL_DICE_AND_CACHE, LOOK_AT_CARD_AND_TUCK})


def roll_dice_and_cache_if_match(ctx: PowerContext) -> Gen:
    """Roll the dice outside the feeder; on a match, cache the food here."""
    food = food_param(ctx)
    if len(ctx.state.birdfeeder) >= FEEDER_CAPACITY:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    roll = yield from effect(RollDiceEffect(player_id=ctx.player_id))
    success = any(die_provides(face, food) for face in roll.rolled)
    yield from event(
        PredatorPowerResolvedEvent(
            player_id=ctx.player_id, bird_instance_id=ctx.bird.instance_id, success=success
        )
    )
    if success:
        yield from effect(
            CacheFoodEffect(player_id=ctx.player_id, bird_instance_id=ctx.bird.instance_id, food=food)
        )


def look_at_card_and_tuck_if_wingspan_under(ctx: PowerContext) -> Gen:
    """Reveal the top card; tuck it if its wingspan is under the limit,
    otherwise discard it."""
    if ctx.state.bird_supply.available == 0:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    reveal = yield from effect(RevealCardsEffect(player_id=ctx.player_id, count=1))
    (card_id,) = reveal.revealed
    card = ctx.state.revealed_card(card_id)
    success = card.wingspan_cm < ctx.param("max_wingspan", 75)
    if success:
        yield from effect(
            TuckCardsEffect(
                player_id=ctx.player_id,
                bird_instance_id=ctx.bird.instance_id,
                from_revealed=[card_id],
            )
        )
    else:
        yield from effect(
            DiscardCardsEffect(player_id=ctx.player_id, card_ids=[card_id], source=CardSource.REVEALED_SET)
        )
    yield from event(
        PredatorPowerResolvedEvent(
            player_id=ctx.player_id, bird_instance_id=ctx.bird.instance_id, success=success
        )
    )

"""Card powers: drawing bird cards and bonus cards."""

from __future__ import annotations

from functools import partial

from core.constants import CardSource, SelectCardsMode, SkipReason

from ..effects import (
    DiscardCardsEffect,
    DiscardEggsEffect,
    DrawBonusCardsEffect,
    DrawCardsEffect,
    RefillBirdTrayEffect,
    RevealBonusCardsEffect,
    RevealCardsEffect,
)
from ..power import HandlerContext, PowerContext, defer_to_end_of_turn, effect, prompt
from ..prompts import (
    DiscardEggsPrompt,
    DrawCardsPrompt,
    SelectBonusCardsPrompt,
    SelectCardsPrompt,
)
from .helpers import Gen, ask_to_activate, draw_from_deck, habitat_param, skip


def draw_cards(ctx: PowerContext) -> Gen:
    """Draw cards from the deck."""
    if ctx.state.bird_supply.available == 0:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    yield from draw_from_deck(ctx, ctx.param("count", 1))


def draw_face_up_cards_from_tray(ctx: PowerContext) -> Gen:
    """Take face-up cards from the tray, optionally only birds of a habitat."""
    habitat = habitat_param(ctx)

    def eligible():
        return tuple(
            card
            for card in ctx.state.bird_supply.tray_cards()
            if habitat is None or card.can_live_in(habitat)
        )

    if not eligible():
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    remaining = ctx.param("count", 1)
    while remaining > 0 and eligible():
        choice = yield from prompt(
            DrawCardsPrompt(
                player_id=ctx.player_id,
                remaining=min(remaining, len(eligible())),
                tray_cards=eligible(),
                deck_available=0,
            )
        )
        drawn = yield from effect(
            DrawCardsEffect(player_id=ctx.player_id, from_tray=list(choice.tray_cards))
        )
        remaining -= drawn.total
    yield from effect(RefillBirdTrayEffect())


def _discard_from_hand(ctx: HandlerContext, count: int) -> Gen:
    player = ctx.player
    count = min(count, len(player.hand))
    if count == 0 or player.forfeited:
        return
    choice = yield from prompt(
        SelectCardsPrompt(
            player_id=ctx.player_id,
            mode=SelectCardsMode.DISCARD,
            source=CardSource.HAND,
            count=count,
            eligible_cards=tuple(player.hand),
        )
    )
    yield from effect(
        DiscardCardsEffect(player_id=ctx.player_id, card_ids=list(choice.cards), source=CardSource.HAND)
    )


def draw_cards_with_delayed_discard(ctx: PowerContext) -> Gen:
    """Draw cards now; discard cards from hand at the end of the turn."""
    if ctx.state.bird_supply.available == 0:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    yield from draw_from_deck(ctx, ctx.param("draw", 2))
    discard = partial(_discard_from_hand, count=ctx.param("discard", 1))
    yield from defer_to_end_of_turn(ctx, discard, f"{ctx.handler_id} discard")


def draw_and_distribute_cards(ctx: PowerContext) -> Gen:
    """Reveal one card per player plus one; each player clockwise from you
    takes one, and you keep the card left over."""
    players = [p for p in ctx.state.clockwise_from(ctx.player_id) if not p.forfeited]
    count = len(players) + 1
    if ctx.state.bird_supply.available < count:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    reveal = yield from effect(RevealCardsEffect(player_id=ctx.player_id, count=count))
    remaining = list(reveal.revealed)
    for player in players:
        if player.forfeited:
            continue
        cards = tuple(ctx.state.revealed_card(card_id) for card_id in remaining)
        choice = yield from prompt(
            SelectCardsPrompt(
                player_id=player.player_id,
                mode=SelectCardsMode.KEEP,
                source=CardSource.REVEALED_SET,
                count=1,
                eligible_cards=cards,
            )
        )
        yield from effect(DrawCardsEffect(player_id=player.player_id, from_revealed=list(choice.cards)))
        remaining = [card_id for card_id in remaining if card_id not in choice.cards]
    if remaining:
        yield from effect(DrawCardsEffect(player_id=ctx.player_id, from_revealed=remaining))


def draw_bonus_cards_and_keep(ctx: PowerContext) -> Gen:
    """Draw bonus cards, keep some and discard the rest."""
    draw = min(ctx.param("draw", 2), ctx.state.bonus_deck.available)
    if draw == 0:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    reveal = yield from effect(RevealBonusCardsEffect(player_id=ctx.player_id, count=draw))
    keep = min(ctx.param("keep", 1), len(reveal.revealed))
    choice = yield from prompt(
        SelectBonusCardsPrompt(
            player_id=ctx.player_id,
            count=keep,
            eligible_cards=tuple(ctx.state.revealed_bonus_card(card_id) for card_id in reveal.revealed),
        )
    )
    yield from effect(
        DrawBonusCardsEffect(
            player_id=ctx.player_id,
            kept=list(choice.cards),
            discarded=[card_id for card_id in reveal.revealed if card_id not in choice.cards],
        )
    )


def discard_egg_to_draw_cards(ctx: PowerContext) -> Gen:
    """Discard eggs from any of your birds to draw cards."""
    eggs = ctx.player.board.eggs_on_birds()
    egg_count = ctx.param("egg_count", 1)
    if sum(eggs.values()) < egg_count or ctx.state.bird_supply.available == 0:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    choice = yield from prompt(
        DiscardEggsPrompt(player_id=ctx.player_id, count=egg_count, eggs_by_eligible_bird=eggs)
    )
    yield from effect(DiscardEggsEffect(player_id=ctx.player_id, sources=dict(choice.sources)))
    yield from draw_from_deck(ctx, ctx.param("card_count", 2))

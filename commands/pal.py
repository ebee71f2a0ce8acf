from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import discord
from discord import app_commands

from providers.palworld import Pal, PalError, PalNotFound, PalworldClient
from utils.fuzzy_search import AutocompleteIndex
from utils.formatting import (
    clip,
    format_drops,
    format_suitabilities,
    format_types,
    suitability_label,
    title_case,
    types_label,
)

logger = logging.getLogger("palbot.pal")

MAX_CHOICES = 25
MAX_CHOICE_LENGTH = 100
EMBED_COLOR = 0x2B8FD6


@dataclass(frozen=True)
class PalState:
    """Names loaded at startup plus the index built over them.

    Replaced as a whole, never mutated.
    """

    names: Tuple[str, ...]
    index: AutocompleteIndex

    @classmethod
    def from_names(cls, names) -> "PalState":
        names = tuple(names)
        return cls(names=names, index=AutocompleteIndex(names))


async def load_pal_state(client: PalworldClient) -> PalState:
    names = await client.fetch_pal_names()
    logger.info("Loaded %s Pal names", len(names))
    return PalState.from_names(names)


# -------------------------
# Embed
# -------------------------

def build_pal_embed(pal: Pal) -> discord.Embed:
    embed = discord.Embed(
        title=clip(pal.name, 256),
        description=clip(pal.description, 4096),
        color=EMBED_COLOR,
    )
    if pal.image_wiki:
        embed.set_thumbnail(url=pal.image_wiki)

    number = f"[#{pal.id}]({pal.wiki})" if pal.wiki else f"#{pal.id}"
    fields = [
        ("Number", number, True),
        (types_label(len(pal.types)), format_types(pal.types), True),
        (title_case(pal.aura.name), pal.aura.description, False),
        (suitability_label(len(pal.suitability)), format_suitabilities(pal.suitability), False),
        ("Drops", format_drops(pal.drops), False),
    ]
    for name, value, inline in fields:
        # Discord rejects fields with an empty name or value
        if not name or not value:
            continue
        embed.add_field(name=clip(name, 256), value=clip(value, 1024), inline=inline)
    return embed


# -------------------------
# Autocomplete
# -------------------------

async def pal_choices(index: AutocompleteIndex, current: str) -> List[app_commands.Choice[str]]:
    try:
        names = await index.lookup_async(current)
    except Exception:
        logger.exception("Error fetching autocomplete for %r", current)
        return []
    # Discord caps choice names and values at 100 characters.
    names = [n for n in names if len(n) <= MAX_CHOICE_LENGTH]
    return [app_commands.Choice(name=n, value=n) for n in names[:MAX_CHOICES]]


async def reply_with_error(interaction: discord.Interaction, error: PalError) -> None:
    if not isinstance(error, PalNotFound):
        logger.error("%s", error)

    try:
        if interaction.response.is_done():
            await interaction.followup.send(f"**Error**: {error}")
        else:
            await interaction.response.send_message(f"**Error**: {error}")
    except discord.HTTPException as e:
        logger.error("Error sending message: %r", e)


def register_pal(bot) -> None:
    """Registers /pal. Expects ``bot.pal_client`` and ``bot.pal_state`` to be set."""

    async def pal_autocomplete(interaction: discord.Interaction, current: str):
        return await pal_choices(bot.pal_state.index, current)

    @bot.tree.command(name="pal", description="Look up a Pal")
    @app_commands.describe(pal="Pal")
    @app_commands.autocomplete(pal=pal_autocomplete)
    async def pal_cmd(interaction: discord.Interaction, pal: str):
        await interaction.response.defer(thinking=True)
        try:
            found = await bot.pal_client.get_pal(pal.strip())
        except PalError as e:
            await reply_with_error(interaction, e)
            return

        try:
            await interaction.followup.send(embed=build_pal_embed(found))
        except discord.HTTPException as e:
            logger.error("Error sending message: %r", e)

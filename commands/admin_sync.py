from __future__ import annotations

import logging
import os
from typing import Optional

import discord
from discord.ext import commands

logger = logging.getLogger("palbot.admin")

SCOPES = ("global", "guild", "clear")


def parse_admin_ids(raw: Optional[str] = None) -> set[int]:
    if raw is None:
        raw = os.getenv("ADMIN_USER_IDS", "")
    raw = raw.strip()
    if not raw:
        return set()
    ids: set[int] = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.add(int(part))
        except ValueError:
            logger.warning("Ignoring invalid ADMIN_USER_IDS entry: %r", part)
    return ids


async def is_admin(bot: commands.Bot, user: discord.abc.User) -> bool:
    ids = parse_admin_ids()
    # Without an explicit list only the application owner may sync.
    if not ids:
        return await bot.is_owner(user)
    return user.id in ids


def register_admin_sync(bot: commands.Bot) -> None:
    """Registers the ``register`` text command.

    Usage (with the default prefix):
      - ``!register`` / ``!register global``: sync slash commands globally.
      - ``!register guild``: copy global commands to this server and sync there.
      - ``!register clear``: remove this server's guild-specific commands.

    Environment variables:
      - ADMIN_USER_IDS: comma-separated Discord user IDs allowed to run it.
        When unset, only the application owner may.

    Notes:
      - Discord global command propagation can take time.
    """

    @bot.command(name="register", help="Re-register slash commands (admin only).")
    async def register(ctx: commands.Context, scope: str = "global"):
        if not await is_admin(bot, ctx.author):
            await ctx.reply("Not authorized.")
            return

        scope = scope.strip().lower()
        if scope not in SCOPES:
            await ctx.reply(f"Unknown scope `{scope}`. Use one of: {', '.join(SCOPES)}.")
            return
        if scope != "global" and ctx.guild is None:
            await ctx.reply(f"`{scope}` can only be used in a server.")
            return

        where = "global" if scope == "global" else f"{ctx.guild.name}#{getattr(ctx.channel, 'name', ctx.channel.id)}"
        logger.debug("Registering application commands (%s) to %s", scope, where)
        try:
            if scope == "global":
                synced = await bot.tree.sync()
                await ctx.reply(f"Requested global sync for {len(synced)} command(s).")
            elif scope == "guild":
                bot.tree.copy_global_to(guild=ctx.guild)
                synced = await bot.tree.sync(guild=ctx.guild)
                await ctx.reply(f"Synced {len(synced)} command(s) to {ctx.guild.name}.")
            else:
                bot.tree.clear_commands(guild=ctx.guild)
                await bot.tree.sync(guild=ctx.guild)
                await ctx.reply(f"Cleared guild commands in {ctx.guild.name}.")
        except discord.HTTPException as e:
            logger.error("Command sync (%s) failed: %s", scope, e)
            await ctx.reply(f"Sync failed: {e}")

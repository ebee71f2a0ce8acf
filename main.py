from __future__ import annotations

import logging
from typing import Optional

import aiohttp
import discord
from aiohttp import web
from discord import app_commands
from discord.ext import commands

from commands.admin_sync import register_admin_sync
from commands.pal import PalState, load_pal_state, register_pal
from providers.palworld import PalworldClient
from utils.config import Settings, load_settings
from utils.healthcheck import start_healthcheck_server

logger = logging.getLogger("palbot")


class PalBot(commands.Bot):
    def __init__(self, settings: Settings) -> None:
        intents = discord.Intents.default()
        # !register is a prefix command, which needs message content.
        intents.message_content = True
        super().__init__(command_prefix=settings.command_prefix, intents=intents)

        self.settings = settings
        self.http_session: Optional[aiohttp.ClientSession] = None
        self.pal_client: Optional[PalworldClient] = None
        self.pal_state: Optional[PalState] = None
        self._healthcheck: Optional[web.AppRunner] = None

        self.tree.on_error = self.on_app_command_error

    async def setup_hook(self) -> None:
        self.http_session = aiohttp.ClientSession()
        self.pal_client = PalworldClient(
            self.http_session,
            self.settings.pal_api_url,
            timeout=self.settings.api_timeout,
        )
        # No bot without an initial name list: let failures propagate.
        self.pal_state = await load_pal_state(self.pal_client)

        register_pal(self)
        register_admin_sync(self)

        synced = await self.tree.sync()
        logger.info("Slash commands synced: %s", [cmd.name for cmd in synced])

        if self.settings.healthcheck_port is not None:
            self._healthcheck = await start_healthcheck_server(self.settings.healthcheck_port, self.health_status)

    def health_status(self) -> dict:
        return {
            "ready": self.is_ready(),
            "pal_names": len(self.pal_state.names) if self.pal_state else 0,
        }

    async def on_ready(self) -> None:
        logger.info("%s is connected!", self.user)

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError) -> None:
        logger.exception("Unhandled error in /%s", interaction.command.name if interaction.command else "?", exc_info=error)
        msg = "Something went wrong while running this command."
        try:
            if interaction.response.is_done():
                await interaction.followup.send(msg, ephemeral=True)
            else:
                await interaction.response.send_message(msg, ephemeral=True)
        except discord.HTTPException as e:
            logger.error("Error sending message: %r", e)

    async def close(self) -> None:
        if self._healthcheck is not None:
            await self._healthcheck.cleanup()
        if self.http_session is not None:
            await self.http_session.close()
        await super().close()


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    bot = PalBot(settings)
    bot.run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    main()

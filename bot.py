import logging

import discord
from discord import app_commands

from app.commands import register_quiz_commands
from app.constants import APP_MODE, APP_VERSION
from app.utils.logger_setup import setup_logging
from app.utils.startup_banner import startup_banner
from app.services.llm import make_llm_client

from config import DISCORD_TOKEN, GUILD_ID

log = logging.getLogger(__name__)


def build_client() -> discord.Client:
    intents = discord.Intents.default()

    llm = make_llm_client()

    class NewsQuizBot(discord.Client):
        def __init__(self) -> None:
            super().__init__(intents=intents)
            self.tree = app_commands.CommandTree(self)

        async def setup_hook(self) -> None:
            register_quiz_commands(self, llm)

            if GUILD_ID:
                guild = discord.Object(id=GUILD_ID)
                self.tree.copy_global_to(guild=guild)
                await self.tree.sync(guild=guild)
            else:
                await self.tree.sync()

    client = NewsQuizBot()

    @client.event
    async def on_ready() -> None:
        if getattr(client, "_ready_once", False):
            return
        client._ready_once = True

        startup_banner(
            surface=f"Discord ({len(client.tree.get_commands())} commands)",
            provider=llm.provider,
            model=llm.model,
            api=llm.base_url,
            version=APP_VERSION,
            mode=APP_MODE,
        )

    return client


def main() -> None:
    setup_logging(console_level="INFO", file_level="DEBUG")

    if not DISCORD_TOKEN:
        raise SystemExit("DISCORD_TOKEN missing in .env")

    client = build_client()
    client.run(DISCORD_TOKEN, log_handler=None)


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging

import discord

from config import ADVANCE_DELAY_MS
from app.utils.embeds import reply_error
from app.services.quiz_controller import QuizController
from app.views.quiz_view import NewsQuizView

log = logging.getLogger(__name__)


def register_quiz_commands(client: discord.Client, llm) -> None:
    @client.tree.command(
        name="newsquiz",
        description="5 AI-generated questions about the latest AI news.",
    )
    async def newsquiz(interaction: discord.Interaction) -> None:
        try:
            if not interaction.response.is_done():
                await interaction.response.defer(thinking=True)
        except (discord.NotFound, discord.InteractionResponded):
            return

        controller = QuizController(llm, advance_delay=ADVANCE_DELAY_MS / 1000.0)
        view = NewsQuizView(controller=controller, owner_id=interaction.user.id)

        try:
            msg = await interaction.followup.send(
                embed=view.build_embed(), view=view, ephemeral=False
            )
        except discord.HTTPException:
            log.exception("News quiz send failed")
            controller.close()
            try:
                await reply_error(interaction, "Could not start the quiz.")
            except discord.HTTPException:
                pass
            return

        view.attach_message(msg)
        # the view re-renders through on_change once the batch is ready
        controller.start()

import logging
from typing import List, Optional

import discord

from app.constants import AI_FOOTER, LOADING_TEXT, OPTION_LABELS
from app.errors import QuizStateError
from app.services.quiz_controller import Phase, QuizController
from app.utils.discord_ui import pretty_bar, silent_ack
from app.utils.embeds import make_embed
from app.utils.text import ellipsize, one_line
from app.views.components.quiz_buttons import AnswerButton, NewQuizButton, RetryButton

log = logging.getLogger("NewsQuiz")

QUESTION_MAX = 800
OPTION_MAX = 200
REVIEW_MAX = 1024


class NewsQuizView(discord.ui.View):
    """
    Discord rendering of a QuizController.

    Flow:
    - Loading -> no buttons
    - Answering -> A B C D; the picked one turns blue until the quiz advances
    - Error -> Try Again
    - Complete -> score + review, Take Another Quiz
    """

    def __init__(self, *, controller: QuizController, owner_id: int):
        super().__init__(timeout=1200)

        self.controller = controller
        self.owner_id = owner_id
        self.controller.on_change = self._on_controller_change

        self._message: Optional[discord.Message] = None

        self.answer_buttons: List[AnswerButton] = [
            AnswerButton(label=label, idx=i) for i, label in enumerate(OPTION_LABELS)
        ]
        self.retry_button = RetryButton()
        self.new_quiz_button = NewQuizButton()

        self.refresh_items()

    # -----------------------------
    # helpers / guards
    # -----------------------------
    def _is_owner(self, interaction: discord.Interaction) -> bool:
        return getattr(interaction.user, "id", None) == self.owner_id

    async def _deny(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message(
            "❌ This quiz is not yours.", ephemeral=True
        )

    def attach_message(self, message: discord.Message) -> None:
        self._message = message

    def refresh_items(self) -> None:
        """Rebuild the component list for the controller's current phase."""
        self.clear_items()
        phase = self.controller.phase

        if phase in (Phase.ANSWERING, Phase.ADVANCING):
            selected = self.controller.session.selected_for_current()
            for btn in self.answer_buttons:
                btn.disabled = False
                btn.style = (
                    discord.ButtonStyle.primary
                    if btn.idx == selected
                    else discord.ButtonStyle.secondary
                )
                self.add_item(btn)
        elif phase is Phase.ERROR:
            self.add_item(self.retry_button)
        elif phase is Phase.COMPLETE:
            self.add_item(self.new_quiz_button)

    async def render(self) -> None:
        if not self._message:
            return
        self.refresh_items()
        try:
            await self._message.edit(embed=self.build_embed(), view=self)
        except discord.HTTPException:
            log.warning("Quiz message edit failed", exc_info=True)

    async def _on_controller_change(self, controller: QuizController) -> None:
        await self.render()

    # -----------------------------
    # embed
    # -----------------------------
    def build_embed(self) -> discord.Embed:
        snap = self.controller.snapshot()

        if snap.phase is Phase.LOADING:
            return make_embed("🧠 Latest AI News Quiz", f"⏳ {LOADING_TEXT}", footer=AI_FOOTER)

        if snap.phase is Phase.ERROR:
            return make_embed(
                "⚠️ Something went wrong",
                snap.message,
                footer="Press Try Again to generate a fresh quiz.",
                color=discord.Color.red(),
            )

        if snap.phase is Phase.COMPLETE:
            review = []
            for r in snap.review:
                mark = "✅" if r.is_correct else "❌"
                review.append(
                    {
                        "name": f"{mark} Q{r.number}. {ellipsize(one_line(r.question), 240)}",
                        "value": ellipsize(
                            f"Your answer: {one_line(r.your_answer or '-')}\n"
                            f"Correct answer: **{one_line(r.correct_answer)}**",
                            REVIEW_MAX,
                        ),
                        "inline": False,
                    }
                )
            return make_embed(
                "🏁 Quiz Complete!",
                f"🎯 You scored **{snap.score}** out of **{snap.total}**",
                fields=review,
                footer=AI_FOOTER,
                color=discord.Color.green(),
            )

        q = snap.question
        opt_lines = [
            f"**{OPTION_LABELS[i]}.**  {ellipsize(one_line(o), OPTION_MAX)}"
            for i, o in enumerate(q.options)
        ]
        bar = pretty_bar(snap.index + 1, snap.total)
        return make_embed(
            "🧠 Latest AI News Quiz",
            (
                f"**Q{snap.index + 1}/{snap.total}**\n\n"
                f"**{ellipsize(one_line(q.text), QUESTION_MAX)}**\n\n"
                + "\n".join(opt_lines)
            ),
            footer=f"Question {snap.index + 1} of {snap.total} {bar}\n{AI_FOOTER}",
        )

    # -----------------------------
    # interactions
    # -----------------------------
    async def pick(self, interaction: discord.Interaction, idx: int) -> None:
        if not self._is_owner(interaction):
            await self._deny(interaction)
            return

        await silent_ack(interaction)

        try:
            self.controller.select_option(idx)
        except (QuizStateError, ValueError) as e:
            log.debug("Ignored pick %s: %s", idx, e)
            return

        await self.render()

    async def retry(self, interaction: discord.Interaction) -> None:
        if not self._is_owner(interaction):
            await self._deny(interaction)
            return

        await silent_ack(interaction)

        try:
            self.controller.retry()
        except QuizStateError as e:
            log.debug("Ignored retry: %s", e)
            return

        await self.render()

    async def new_quiz(self, interaction: discord.Interaction) -> None:
        if not self._is_owner(interaction):
            await self._deny(interaction)
            return

        await silent_ack(interaction)

        try:
            self.controller.new_quiz()
        except QuizStateError as e:
            log.debug("Ignored new quiz: %s", e)
            return

        await self.render()

    async def on_timeout(self) -> None:
        self.controller.close()
        self.clear_items()
        if self._message:
            try:
                await self._message.edit(view=None)
            except discord.HTTPException:
                pass

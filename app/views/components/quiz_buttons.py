import discord
from app.utils.discord_ui import internal_error

RETRY_LABEL = "Try Again"
NEW_QUIZ_LABEL = "Take Another Quiz"


class AnswerButton(discord.ui.Button):
    def __init__(self, label: str, idx: int):
        super().__init__(label=label, style=discord.ButtonStyle.secondary, row=0)
        self.idx = idx

    async def callback(self, interaction: discord.Interaction):
        view = self.view
        if not view or not hasattr(view, "pick"):
            return await internal_error(interaction)
        await view.pick(interaction, self.idx)


class RetryButton(discord.ui.Button):
    def __init__(self):
        super().__init__(label=RETRY_LABEL, style=discord.ButtonStyle.primary, row=1)

    async def callback(self, interaction: discord.Interaction):
        view = self.view
        if not view or not hasattr(view, "retry"):
            return await internal_error(interaction)
        await view.retry(interaction)


class NewQuizButton(discord.ui.Button):
    def __init__(self):
        super().__init__(label=NEW_QUIZ_LABEL, style=discord.ButtonStyle.success, row=1)

    async def callback(self, interaction: discord.Interaction):
        view = self.view
        if not view or not hasattr(view, "new_quiz"):
            return await internal_error(interaction)
        await view.new_quiz(interaction)

import discord


def pretty_bar(current_1based: int, total: int, width: int = 10) -> str:
    if total <= 0:
        return ""
    current = max(0, min(current_1based, total))
    filled = round(current / total * width)
    return f"[{'#' * filled}{'-' * (width - filled)}]"


async def silent_ack(interaction: discord.Interaction) -> None:
    try:
        if not interaction.response.is_done():
            await interaction.response.defer()
    except discord.HTTPException:
        pass


async def internal_error(interaction: discord.Interaction) -> None:
    if not interaction.response.is_done():
        await interaction.response.send_message("❌ Internal error.", ephemeral=True)

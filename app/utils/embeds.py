from typing import Any, Dict, List, Optional
import discord

from app.utils.text import ellipsize

FIELD_VALUE_MAX = 1024
MAX_FIELDS = 25


def make_embed(
    title: str,
    description: str = "",
    *,
    footer: str = "",
    fields: Optional[List[Dict[str, Any]]] = None,
    color: Optional[discord.Color] = None,
) -> discord.Embed:
    e = discord.Embed(
        title=title[:256],
        description=(description[:4096] if description else ""),
        color=color or discord.Color.dark_grey(),
    )

    for f in (fields or [])[:MAX_FIELDS]:
        name = str(f.get("name", ""))[:256] or "-"
        value = ellipsize(str(f.get("value", "-")), FIELD_VALUE_MAX) or "-"
        e.add_field(name=name, value=value, inline=bool(f.get("inline", False)))

    if footer:
        e.set_footer(text=footer[:2048])
    return e


async def reply_error(
    interaction: discord.Interaction,
    message: str,
    *,
    hint: str = "",
    ephemeral: bool = True,
) -> None:
    fields = [{"name": "Error", "value": message, "inline": False}]
    if hint:
        fields.append({"name": "Hint", "value": hint, "inline": False})
    e = make_embed(
        "⚠️ Something went wrong",
        "Please try again.",
        fields=fields,
        footer="If this keeps happening, check your LLM backend and logs.",
    )
    if interaction.response.is_done():
        await interaction.followup.send(embed=e, ephemeral=ephemeral)
    else:
        await interaction.response.send_message(embed=e, ephemeral=ephemeral)

from .quiz_commands import register_quiz_commands

__all__ = [
    "register_quiz_commands",
]

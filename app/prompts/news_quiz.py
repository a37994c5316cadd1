from app.constants import OPTION_COUNT, QUESTION_COUNT


def news_quiz_system_prompt() -> str:
    return (
        "You write multiple-choice quiz questions about artificial intelligence news.\n"
        "Output JSON ONLY.\n"
        "ABSOLUTE RULES:\n"
        "- No commentary, no titles, no markdown.\n"
        "- Exactly ONE correct option per question.\n"
    )


def build_news_quiz_prompt() -> str:
    return (
        f"Generate exactly {QUESTION_COUNT} multiple choice questions about the latest "
        "artificial intelligence news, updates, and developments from the last 24 hours. "
        "Focus on recent AI announcements, product launches, research breakthroughs, "
        "or industry developments.\n\n"
        "Format your response as a JSON array of objects. Each object must have:\n"
        "{\n"
        '  "question": "the question text about a specific recent AI news item or update",\n'
        '  "options": ["option 1", "option 2", "option 3", "option 4"],\n'
        f'  "correctAnswer": 0\n'
        "}\n"
        f"correctAnswer is the zero-based index of the correct option (0-{OPTION_COUNT - 1}).\n\n"
        "Guidelines for questions:\n"
        "- Each question is about a different recent AI news item or update.\n"
        "- Include specific details like company names, product names, or research findings.\n"
        "- Make questions factual and based on real recent developments.\n"
        "- Keep them engaging and informative.\n"
        "- Explain technical terms clearly.\n\n"
        f"Each question has exactly {OPTION_COUNT} options.\n"
        "Ensure the JSON is valid and properly formatted."
    )

from typing import List

APP_NAME = "NewsQuiz"
APP_VERSION = "1.0.0"
APP_MODE = "Development"

AI_FOOTER = "AI generated - Verify with official sources"

QUESTION_COUNT = 5
OPTION_COUNT = 4
OPTION_LABELS: List[str] = ["A", "B", "C", "D"]

# -----------------------------
# User-facing messages
# -----------------------------
MSG_TRANSPORT = "Failed to generate questions. Please try again later."
MSG_PARSE = "Failed to parse AI response. Please try again."
MSG_FORMAT = "Invalid response format: Expected array of 5 questions"
MSG_QUESTION_FORMAT = "Invalid question format"

LOADING_TEXT = "Generating your AI News quiz..."

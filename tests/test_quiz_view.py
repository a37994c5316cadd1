import asyncio
from types import SimpleNamespace

import discord

from app.services.quiz_controller import Phase, QuizController
from app.utils.discord_ui import pretty_bar
from app.views.quiz_view import NewsQuizView
from conftest import CORRECT, FakeLLM, settle

OWNER = 7


class FakeMessage:
    def __init__(self):
        self.edits = []

    async def edit(self, **kwargs):
        self.edits.append(kwargs)


class FakeResponse:
    def __init__(self):
        self.sent = []

    def is_done(self) -> bool:
        return bool(self.sent)

    async def defer(self):
        self.sent.append(("defer", None))

    async def send_message(self, content=None, **kwargs):
        self.sent.append(("message", content))


def _interaction(user_id: int = OWNER):
    return SimpleNamespace(user=SimpleNamespace(id=user_id), response=FakeResponse())


def test_view_follows_controller_through_a_full_quiz(valid_raw):
    async def run():
        ctrl = QuizController(FakeLLM(valid_raw), advance_delay=0)
        view = NewsQuizView(controller=ctrl, owner_id=OWNER)
        msg = FakeMessage()
        view.attach_message(msg)

        assert view.children == []
        assert "Generating your AI News quiz" in view.build_embed().description

        await ctrl.load()

        assert msg.edits, "generation result should re-render the message"
        assert msg.edits[-1]["embed"].description.startswith("**Q1/5**")
        assert [b.label for b in view.children] == ["A", "B", "C", "D"]

        await view.pick(_interaction(), 1)
        assert ctrl.phase is Phase.ADVANCING
        assert view.answer_buttons[1].style == discord.ButtonStyle.primary
        assert view.answer_buttons[0].style == discord.ButtonStyle.secondary

        await settle()
        assert msg.edits[-1]["embed"].description.startswith("**Q2/5**")

        for pick in CORRECT[1:]:
            await view.pick(_interaction(), pick)
            await settle()

        assert ctrl.phase is Phase.COMPLETE
        embed = msg.edits[-1]["embed"]
        assert embed.title == "🏁 Quiz Complete!"
        assert "**5** out of **5**" in embed.description
        assert len(embed.fields) == 5
        assert view.children == [view.new_quiz_button]

    asyncio.run(run())


def test_other_users_cannot_answer(valid_raw):
    async def run():
        ctrl = QuizController(FakeLLM(valid_raw), advance_delay=0)
        view = NewsQuizView(controller=ctrl, owner_id=OWNER)
        await ctrl.load()

        stranger = _interaction(user_id=99)
        await view.pick(stranger, 0)

        assert stranger.response.sent == [("message", "❌ This quiz is not yours.")]
        assert ctrl.session.selected_answers == {}

    asyncio.run(run())


def test_error_shows_retry_and_recovers(valid_raw):
    async def run():
        ctrl = QuizController(FakeLLM("not json", valid_raw), advance_delay=0)
        view = NewsQuizView(controller=ctrl, owner_id=OWNER)
        msg = FakeMessage()
        view.attach_message(msg)

        await ctrl.load()

        assert view.children == [view.retry_button]
        assert "Failed to parse AI response" in msg.edits[-1]["embed"].description

        await view.retry(_interaction())
        assert ctrl.phase is Phase.LOADING
        assert view.children == []

        await settle()
        assert ctrl.phase is Phase.ANSWERING
        assert len(view.children) == 4

    asyncio.run(run())


def test_timeout_closes_controller(valid_raw):
    async def run():
        ctrl = QuizController(FakeLLM(valid_raw), advance_delay=5)
        view = NewsQuizView(controller=ctrl, owner_id=OWNER)
        await ctrl.load()
        await view.pick(_interaction(), 0)
        assert ctrl.advance_pending

        await view.on_timeout()
        await settle()

        assert not ctrl.advance_pending
        assert view.children == []

    asyncio.run(run())


def test_progress_bar():
    assert pretty_bar(1, 5) == "[##--------]"
    assert pretty_bar(5, 5) == "[##########]"
    assert pretty_bar(9, 5) == "[##########]"
    assert pretty_bar(1, 0) == ""

"""Tests for the Telegram transport."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.integrations.telegram import TelegramBot, build_keyboard
from src.orchestrator.replies import CONFIRM_EDIT_BUTTONS, Reply


@pytest.fixture
def controller():
    controller = MagicMock()
    controller.handle_text = AsyncMock(return_value=[Reply("hello")])
    controller.handle_action = AsyncMock(return_value=[Reply("added"), Reply("done")])
    return controller


@pytest.fixture
def bot(controller):
    bot = TelegramBot("123:abc", controller)
    bot.application = MagicMock()
    bot.application.bot.send_message = AsyncMock()
    return bot


def text_update(chat_id: int, text: str):
    update = MagicMock()
    update.effective_chat.id = chat_id
    update.message.text = text
    return update


class TestBuildKeyboard:
    def test_no_buttons(self):
        assert build_keyboard([]) is None

    def test_single_row(self):
        markup = build_keyboard(CONFIRM_EDIT_BUTTONS)

        row = markup.inline_keyboard[0]
        assert len(markup.inline_keyboard) == 1
        assert [(b.text, b.callback_data) for b in row] == [
            ("Confirm", "confirm"),
            ("Edit", "edit"),
        ]


class TestHandlers:
    """Tests for inbound updates."""

    @pytest.mark.asyncio
    async def test_text_is_routed_to_controller(self, bot, controller, chat_id):
        await bot._handle_text(text_update(chat_id, "/calendars"), MagicMock())

        controller.handle_text.assert_awaited_once_with(chat_id, "/calendars")
        bot.application.bot.send_message.assert_awaited_once_with(
            chat_id=chat_id, text="hello", reply_markup=None
        )

    @pytest.mark.asyncio
    async def test_update_without_message_is_ignored(self, bot, controller):
        update = MagicMock()
        update.message = None

        await bot._handle_text(update, MagicMock())

        controller.handle_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_callback_sends_replies_in_order_then_answers(
        self, bot, controller, chat_id
    ):
        update = MagicMock()
        update.effective_chat.id = chat_id
        update.callback_query.data = "confirm"
        update.callback_query.answer = AsyncMock()

        await bot._handle_callback(update, MagicMock())

        controller.handle_action.assert_awaited_once_with(chat_id, "confirm")
        sent = [c.kwargs["text"] for c in bot.application.bot.send_message.await_args_list]
        assert sent == ["added", "done"]
        update.callback_query.answer.assert_awaited_once()


class TestSendReplies:
    @pytest.mark.asyncio
    async def test_buttons_become_keyboard(self, bot, chat_id):
        await bot.send_replies(chat_id, [Reply("Please confirm", buttons=list(CONFIRM_EDIT_BUTTONS))])

        markup = bot.application.bot.send_message.await_args.kwargs["reply_markup"]
        assert markup.inline_keyboard[0][0].callback_data == "confirm"

    @pytest.mark.asyncio
    async def test_not_started(self, controller, chat_id):
        bot = TelegramBot("123:abc", controller)

        await bot.send_replies(chat_id, [Reply("lost")])

        assert bot.is_running is False


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_and_stop(self, controller):
        application = MagicMock()
        application.initialize = AsyncMock()
        application.start = AsyncMock()
        application.stop = AsyncMock()
        application.shutdown = AsyncMock()
        application.updater.start_polling = AsyncMock()
        application.updater.stop = AsyncMock()
        bot = TelegramBot("123:abc", controller)
        bot.build_application = MagicMock(return_value=application)

        await bot.start()
        assert bot.is_running is True
        application.updater.start_polling.assert_awaited_once_with(
            allowed_updates=["message", "callback_query"]
        )

        await bot.stop()
        assert bot.is_running is False
        application.shutdown.assert_awaited_once()

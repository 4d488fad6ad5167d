"""
Telegram transport for the Calendar Assistant.

Delivers inbound text (commands included) and inline-button presses to the
ConversationController and sends its replies back. Runs in polling mode
inside the API process.
"""

import logging
from typing import Optional, Sequence

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CallbackQueryHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from src.orchestrator.controller import ConversationController
from src.orchestrator.replies import Button, Reply

logger = logging.getLogger(__name__)


def build_keyboard(buttons: Sequence[Button]) -> Optional[InlineKeyboardMarkup]:
    """One row of inline buttons, or None when there are no buttons."""
    if not buttons:
        return None
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(button.label, callback_data=button.action) for button in buttons]]
    )


class TelegramBot:
    """
    Polling Telegram bot bound to a controller.

    Usage:
        bot = TelegramBot(token, controller)
        await bot.start()
        ...
        await bot.stop()
    """

    def __init__(self, token: str, controller: ConversationController):
        self.token = token
        self.controller = controller
        self.application: Optional[Application] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def build_application(self) -> Application:
        application = ApplicationBuilder().token(self.token).build()

        application.add_handler(MessageHandler(filters.TEXT, self._handle_text))
        application.add_handler(CallbackQueryHandler(self._handle_callback))
        application.add_error_handler(self._handle_error)
        return application

    async def start(self) -> None:
        """Initialize the bot and start polling."""
        self.application = self.build_application()

        await self.application.initialize()
        await self.application.start()
        await self.application.updater.start_polling(
            allowed_updates=["message", "callback_query"]
        )
        self._running = True
        logger.info("Telegram bot polling started")

    async def stop(self) -> None:
        """Stop polling and shut down."""
        if self.application:
            await self.application.updater.stop()
            await self.application.stop()
            await self.application.shutdown()

        self._running = False
        logger.info("Telegram bot stopped")

    async def send_replies(self, chat_id: int, replies: Sequence[Reply]) -> None:
        """Send replies in order, attaching inline buttons where present."""
        if self.application is None:
            logger.warning(f"[{chat_id}] Bot not started; dropping {len(replies)} replies")
            return

        for reply in replies:
            await self.application.bot.send_message(
                chat_id=chat_id,
                text=reply.text,
                reply_markup=build_keyboard(reply.buttons),
            )

    async def _handle_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not update.message or not update.effective_chat:
            return

        chat_id = update.effective_chat.id
        replies = await self.controller.handle_text(chat_id, update.message.text or "")
        await self.send_replies(chat_id, replies)

    async def _handle_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        if query is None or update.effective_chat is None:
            return

        chat_id = update.effective_chat.id
        replies = await self.controller.handle_action(chat_id, query.data or "")
        await self.send_replies(chat_id, replies)
        await query.answer()

    async def _handle_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error(f"Telegram update failed: {context.error}", exc_info=context.error)

"""Ordered conversation state with append-to-tail streaming.

Hidden design decisions:
- Which message receives an arriving fragment (only the open model turn)
- What happens to a partial answer when its stream fails
"""

import asyncio
import logging
from collections.abc import AsyncIterable, Callable, Iterator

from ..llm.models import ChatMessage

logger = logging.getLogger(__name__)

FragmentCallback = Callable[[str, ChatMessage], None]


class Conversation:
    """Ordered sequence of chat messages for one participant.

    At most one model message is open at a time; it is always the last
    message and is the only one that fragments are appended to. Once a turn
    is closed its text no longer changes.
    """

    def __init__(self, messages: list[ChatMessage] | None = None):
        self._messages: list[ChatMessage] = list(messages or [])
        self._open: ChatMessage | None = None

    @property
    def messages(self) -> list[ChatMessage]:
        """Snapshot of the message list (messages themselves are shared)."""
        return list(self._messages)

    @property
    def is_streaming(self) -> bool:
        """Whether a model turn is currently open."""
        return self._open is not None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(list(self._messages))

    def add_user_turn(self, text: str) -> ChatMessage:
        """Append a user message."""
        if self._open is not None:
            raise RuntimeError("Cannot add a user turn while a model turn is streaming")
        message = ChatMessage(role="user", text=text)
        self._messages.append(message)
        return message

    def open_model_turn(self) -> ChatMessage:
        """Append an empty model placeholder that will receive fragments."""
        if self._open is not None:
            raise RuntimeError("A model turn is already open")
        self._open = ChatMessage(role="model", text="")
        self._messages.append(self._open)
        return self._open

    def append_fragment(self, fragment: str) -> ChatMessage:
        """Append a fragment to the open model turn."""
        if self._open is None:
            raise RuntimeError("No open model turn to append to")
        self._open.text += fragment
        return self._open

    def close_turn(self) -> ChatMessage:
        """Finish the open model turn, keeping its text."""
        if self._open is None:
            raise RuntimeError("No open model turn to close")
        message, self._open = self._open, None
        return message

    def discard_open_turn(self) -> None:
        """Remove the open model turn and whatever text it accumulated."""
        if self._open is None:
            return
        self._messages.remove(self._open)
        self._open = None

    def mark_open_turn_failed(self, marker: str) -> ChatMessage:
        """Replace the open turn's text with an error marker and close it."""
        if self._open is None:
            raise RuntimeError("No open model turn to mark")
        self._open.text = marker
        return self.close_turn()

    def history_before_open_turn(self) -> list[ChatMessage]:
        """Messages preceding the most recent user turn.

        Used as prior context when the newest user turn is sent separately.
        """
        messages = [m for m in self._messages if m is not self._open]
        if messages and messages[-1].role == "user":
            messages = messages[:-1]
        return messages

    def clear(self) -> None:
        """Drop every message."""
        self._messages.clear()
        self._open = None


async def merge_stream(
    conversation: Conversation,
    stream: AsyncIterable[str],
    on_fragment: FragmentCallback | None = None,
) -> str:
    """Append each fragment of ``stream`` to the conversation's open turn.

    Fragments are applied in arrival order; ``on_fragment`` is called once
    per fragment after it has been applied.

    Returns:
        The accumulated text of the open turn
    """
    message = None
    async for fragment in stream:
        message = conversation.append_fragment(fragment)
        logger.debug("Merged fragment of %d chars", len(fragment))
        if on_fragment is not None:
            on_fragment(fragment, message)
    return message.text if message is not None else ""


async def stream_into(
    conversation: Conversation,
    stream: AsyncIterable[str],
    on_fragment: FragmentCallback | None = None,
) -> ChatMessage:
    """Stream a single model answer into a conversation, all or nothing.

    Opens a placeholder model turn, merges every fragment into it and closes
    it. If the stream fails (or is cancelled) part way, the partial message
    is removed so the history shows no answer rather than a truncated one,
    and the error is re-raised once.

    Returns:
        The completed model message
    """
    conversation.open_model_turn()
    try:
        await merge_stream(conversation, stream, on_fragment)
    except (Exception, asyncio.CancelledError):
        conversation.discard_open_turn()
        raise
    return conversation.close_turn()

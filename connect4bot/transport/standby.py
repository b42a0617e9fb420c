"""
standby.py - Predicate-matching message subscriptions

The Standby receives every inbound message through ``process`` and hands it
to whichever coroutines are currently waiting on that channel with a
predicate the message satisfies. Each call to ``wait_for_message`` owns
exactly one subscription, which is dropped once it is matched, failed or
cancelled.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional

from connect4bot.debug import debug
from connect4bot.transport.messages import Message, Predicate, StandbyClosed, WaitFailed


@dataclass(eq=False)
class _Subscription:
    channel: Hashable
    predicate: Predicate
    future: asyncio.Future = field(repr=False)


class Standby:
    """Hub of one-shot, predicate-filtered message subscriptions."""

    def __init__(self):
        self._subscriptions: Dict[Hashable, List[_Subscription]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self, channel: Optional[Hashable] = None) -> int:
        """Number of live subscriptions, optionally restricted to one channel."""
        if channel is not None:
            return len(self._subscriptions.get(channel, ()))
        return sum(len(subs) for subs in self._subscriptions.values())

    async def wait_for_message(self, channel: Hashable, predicate: Predicate) -> Message:
        """
        Wait for the next message on ``channel`` satisfying ``predicate``.

        Raises:
            WaitFailed: the subscription was abandoned (``cancel``/``close``) or
                the predicate raised
            StandbyClosed: the standby no longer accepts subscriptions
        """
        if self._closed:
            raise StandbyClosed("Standby is closed")

        subscription = _Subscription(channel, predicate, asyncio.get_running_loop().create_future())
        self._subscriptions.setdefault(channel, []).append(subscription)
        debug.trace(f"Subscribed on channel {channel} ({self.pending(channel)} pending)", "standby")
        try:
            return await subscription.future
        finally:
            self._remove(subscription)

    def process(self, message: Message) -> int:
        """
        Offer ``message`` to every live subscription on its channel.

        Returns:
            Number of subscriptions the message resolved
        """
        matched = 0
        for subscription in list(self._subscriptions.get(message.channel_id, ())):
            if subscription.future.done():
                continue
            try:
                is_match = subscription.predicate(message)
            except Exception as e:
                debug.warning(f"Predicate failed on channel {message.channel_id}: {e}", "standby")
                subscription.future.set_exception(WaitFailed(f"Predicate raised: {e}"))
                continue
            if is_match:
                subscription.future.set_result(message)
                matched += 1

        if matched:
            debug.trace(f"Message from {message.author_id} resolved {matched} waiter(s)", "standby")
        return matched

    def cancel(self, channel: Hashable) -> int:
        """Fail every pending subscription on ``channel``; returns how many were failed."""
        return self._fail(self._subscriptions.get(channel, ()), f"Subscription on channel {channel} abandoned")

    def close(self) -> int:
        """Fail all pending subscriptions and refuse new ones."""
        self._closed = True
        failed = 0
        for subscriptions in list(self._subscriptions.values()):
            failed += self._fail(subscriptions, "Standby closed")
        debug.debug(f"Standby closed, {failed} waiter(s) failed", "standby")
        return failed

    def _fail(self, subscriptions, reason: str) -> int:
        failed = 0
        for subscription in list(subscriptions):
            if not subscription.future.done():
                subscription.future.set_exception(WaitFailed(reason))
                failed += 1
        return failed

    def _remove(self, subscription: _Subscription) -> None:
        subscriptions = self._subscriptions.get(subscription.channel)
        if not subscriptions:
            return
        if subscription in subscriptions:
            subscriptions.remove(subscription)
        if not subscriptions:
            del self._subscriptions[subscription.channel]

"""
Messaging Service Layer.

Architecture
------------
- ``MessageService`` — append, conversation listing, read receipts.

Ordering contract: conversations are returned by ``timestamp`` ascending,
with the insertion id breaking ties so that the order is stable.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db.models import Q, QuerySet

from cases.models import Case
from core.domain.access import ActorContext
from core.domain.exceptions import DomainError, Unauthorized
from core.domain.notifications import EventKind, NotificationFanout, TransitionEvent
from core.domain.transactions import get_or_not_found

from .models import Message

logger = logging.getLogger(__name__)

User = get_user_model()


class MessageService:
    """Stores and reads direct messages."""

    @staticmethod
    def append(
        actor: ActorContext,
        *,
        receiver_id: Any,
        content: str,
        case_id: Any = None,
    ) -> Message:
        """
        Send a message from ``actor`` to ``receiver_id``.

        The receiver gets a ``new_message`` notification after the
        message is stored; the sender does not.

        Raises
        ------
        NotFound
            Receiver or referenced case does not exist.
        DomainError
            Sender and receiver are the same user.
        """
        receiver = get_or_not_found(User.objects.filter(is_active=True), pk=receiver_id)
        if str(receiver.pk) == str(actor.id):
            raise DomainError("You cannot send a message to yourself.")

        case = None
        if case_id is not None:
            case = get_or_not_found(Case.objects.all(), pk=case_id)

        message = Message.objects.create(
            sender_id=actor.id,
            receiver=receiver,
            case=case,
            content=content,
        )
        logger.info(
            "Message #%s stored: user=%s -> user=%s",
            message.pk, actor.id, receiver.pk,
        )

        message = Message.objects.select_related("sender", "receiver", "case").get(pk=message.pk)
        NotificationFanout.on_transition(
            TransitionEvent(kind=EventKind.MESSAGE_SENT, actor_id=actor.id, message=message)
        )
        return message

    @staticmethod
    def list_conversation(
        actor: ActorContext,
        *,
        other_user_id: Any = None,
        case_id: Any = None,
    ) -> QuerySet[Message]:
        """
        Messages visible to ``actor``, oldest first.

        Parameters
        ----------
        other_user_id : optional
            Restrict to the two-way thread with this user.  Without it,
            every message the actor sent or received is returned.
        case_id : optional
            Restrict to messages about this case.
        """
        qs = Message.objects.select_related("sender", "receiver")
        if other_user_id is not None:
            qs = qs.filter(
                Q(sender_id=actor.id, receiver_id=other_user_id)
                | Q(sender_id=other_user_id, receiver_id=actor.id)
            )
        else:
            qs = qs.filter(Q(sender_id=actor.id) | Q(receiver_id=actor.id))
        if case_id is not None:
            qs = qs.filter(case_id=case_id)
        return qs.order_by("timestamp", "id")

    @staticmethod
    def mark_read(message_id: Any, actor: ActorContext) -> Message:
        """
        Mark a message read.  Idempotent; only the receiver may do it.

        Raises
        ------
        NotFound
            Message does not exist.
        Unauthorized
            Actor is not the receiver.
        """
        message = get_or_not_found(Message.objects.all(), pk=message_id)
        if str(message.receiver_id) != str(actor.id):
            raise Unauthorized("Only the receiver can mark a message as read.")

        # false → true only
        Message.objects.filter(pk=message.pk, read=False).update(read=True)
        message.read = True
        return message

    @staticmethod
    def mark_conversation_read(actor: ActorContext, other_user_id: Any) -> int:
        """
        Mark every unread message from ``other_user_id`` to ``actor`` read.

        Returns
        -------
        int
            Number of messages that changed.
        """
        updated = Message.objects.filter(
            sender_id=other_user_id,
            receiver_id=actor.id,
            read=False,
        ).update(read=True)
        logger.info(
            "Marked %d message(s) from user=%s read for user=%s",
            updated, other_user_id, actor.id,
        )
        return updated

"""
Messaging app models.

Direct messages between two users, optionally about a case.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class Message(models.Model):
    """
    One message from ``sender`` to ``receiver``.

    Immutable once sent except ``read``, which only the receiver may set
    (false → true).
    """

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
        verbose_name="Sender",
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_messages",
        verbose_name="Receiver",
    )
    case = models.ForeignKey(
        "cases.Case",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="messages",
        verbose_name="Related Case",
    )
    content = models.TextField(verbose_name="Content")
    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name="Sent At")
    read = models.BooleanField(default=False, verbose_name="Read")

    class Meta:
        verbose_name = "Message"
        verbose_name_plural = "Messages"
        ordering = ["timestamp", "id"]
        indexes = [
            models.Index(fields=["sender", "receiver"], name="msg_sender_receiver_idx"),
            models.Index(fields=["receiver", "read"], name="msg_receiver_read_idx"),
        ]

    def __str__(self):
        return f"{self.sender_id} → {self.receiver_id} @ {self.timestamp:%Y-%m-%d %H:%M}"

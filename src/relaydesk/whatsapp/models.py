"""Inbound WhatsApp message variants.

A webhook message becomes exactly one variant. The variant decides where the
reply text comes from, in priority order: text body, quick-reply button
payload, interactive button-reply id.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TextReply:
    sender: str
    body: str

    @property
    def reply(self) -> str:
        return self.body


@dataclass(frozen=True)
class ButtonReply:
    """Tap on a template quick-reply button."""

    sender: str
    payload: str

    @property
    def reply(self) -> str:
        return self.payload


@dataclass(frozen=True)
class InteractiveReply:
    """Tap on an interactive message's reply button."""

    sender: str
    button_id: str

    @property
    def reply(self) -> str:
        return self.button_id


@dataclass(frozen=True)
class UnsupportedMessage:
    """Image, audio, reaction, etc. Carries no reply content."""

    sender: str
    kind: str

    @property
    def reply(self) -> str:
        return ""


InboundMessage = Union[TextReply, ButtonReply, InteractiveReply, UnsupportedMessage]

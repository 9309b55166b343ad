"""Chat message data models (provider-agnostic)."""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class ChatRole(StrEnum):
    """Role of a participant in a chat conversation.

    There is deliberately no ``system`` member: system prompts are configured on
    the provider and injected by each adapter at the wire boundary.
    """

    USER = "user"
    ASSISTANT = "assistant"


class ImageMime(StrEnum):
    """Supported image MIME types."""

    JPEG = "image/jpeg"
    PNG = "image/png"
    GIF = "image/gif"
    WEBP = "image/webp"

    @property
    def mime_type(self) -> str:
        return self.value


class ReasoningEffort(StrEnum):
    """Reasoning effort hint accepted by reasoning-capable models."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Message type variants
class TextType(BaseModel):
    """Plain text message."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"


class ImageType(BaseModel):
    """Inline image attachment. Bytes are not checked against the MIME type."""

    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    mime: ImageMime
    data: bytes


class PdfType(BaseModel):
    """Inline PDF attachment."""

    model_config = ConfigDict(frozen=True)

    type: Literal["pdf"] = "pdf"
    data: bytes


class ImageURLType(BaseModel):
    """Image referenced by URL."""

    model_config = ConfigDict(frozen=True)

    type: Literal["image_url"] = "image_url"
    url: str


MessageType = TextType | ImageType | PdfType | ImageURLType


class ChatMessage(BaseModel):
    """A single message in a chat conversation."""

    model_config = ConfigDict(frozen=True)

    role: ChatRole
    message_type: MessageType = TextType()
    content: str = ""

    @classmethod
    def user(cls) -> "ChatMessageBuilder":
        """Start building a user message."""
        return ChatMessageBuilder(ChatRole.USER)

    @classmethod
    def assistant(cls) -> "ChatMessageBuilder":
        """Start building an assistant message."""
        return ChatMessageBuilder(ChatRole.ASSISTANT)


class ChatMessageBuilder:
    """Fluent builder for ChatMessage.

    The role is fixed at creation. Content and attachment may be set in any
    order; each attachment setter replaces whatever attachment was set before.
    """

    def __init__(self, role: ChatRole):
        self.role = role
        self.message_type: MessageType = TextType()
        self._content = ""

    def content(self, content: str) -> "ChatMessageBuilder":
        """Set the message text."""
        self._content = content
        return self

    def image(self, mime: ImageMime, data: bytes) -> "ChatMessageBuilder":
        """Attach raw image bytes."""
        self.message_type = ImageType(mime=mime, data=data)
        return self

    def pdf(self, data: bytes) -> "ChatMessageBuilder":
        """Attach raw PDF bytes."""
        self.message_type = PdfType(data=data)
        return self

    def image_url(self, url: str) -> "ChatMessageBuilder":
        """Attach an image by URL."""
        self.message_type = ImageURLType(url=url)
        return self

    def build(self) -> ChatMessage:
        """Build the immutable message. Never fails."""
        return ChatMessage(role=self.role, message_type=self.message_type, content=self._content)

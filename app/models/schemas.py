"""Pydantic schemas for request/response models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageSender(str, Enum):
    """Message variants in a conversation transcript."""
    USER = "user"
    AI = "ai"
    STATUS = "status"


class TurnOutcome(str, Enum):
    """How a submitted turn settled."""
    IGNORED = "ignored"
    FAILED = "failed"
    COMPLETED = "completed"


class Borrower(BaseModel):
    """A customer record with an outstanding balance."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., description="Borrower identifier")
    name: str = Field(..., min_length=1, description="Display name")
    email: str = Field(..., description="Email address")
    phone: str = Field(..., description="Phone number used as the WhatsApp address")
    outstanding_amount: float = Field(
        ..., ge=0, alias="outstandingAmount", description="Outstanding amount"
    )


class Message(BaseModel):
    """A single transcript entry. Immutable once appended."""
    model_config = ConfigDict(frozen=True)

    sender: MessageSender
    text: str

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(sender=MessageSender.USER, text=text)

    @classmethod
    def ai(cls, text: str) -> "Message":
        return cls(sender=MessageSender.AI, text=text)

    @classmethod
    def status(cls, text: str) -> "Message":
        return cls(sender=MessageSender.STATUS, text=text)


class Counters(BaseModel):
    """Per-borrower send/receive counters."""
    model_config = ConfigDict(frozen=True)

    sent: int = 0
    received: int = 0


# Request Models
class ChatRequest(BaseModel):
    """AI chat completion request."""
    message: str = Field(..., description="Current message text")
    borrower: Borrower
    history: List[Message] = Field(default_factory=list, description="Prior conversation")


class WhatsAppRequest(BaseModel):
    """WhatsApp delivery request."""
    message: str = Field(..., description="Message body")
    to: str = Field(..., description="Destination phone number")


class EmailRequest(BaseModel):
    """Email delivery request."""
    message: str = Field(..., description="Plain-text body")
    to: str = Field(..., description="Destination address")
    subject: str = Field(..., description="Subject line")


class SubmitMessageRequest(BaseModel):
    """Operator message for a borrower conversation."""
    text: str = ""


# Response Models
class ChatResponse(BaseModel):
    reply: str


class DeliveryResponse(BaseModel):
    success: bool = True
    message_id: Optional[str] = None


class ConversationResponse(BaseModel):
    """Read view of one borrower's conversation."""
    borrower_id: int
    messages: List[Message]
    counters: Counters
    in_flight: bool = False


class TurnResult(BaseModel):
    """Result of submitting one operator message."""
    outcome: TurnOutcome
    borrower_id: Optional[int] = None
    appended: List[Message] = Field(default_factory=list)
    error: Optional[str] = None
    counters: Counters = Field(default_factory=Counters)

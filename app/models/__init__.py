"""
Models package for the Borrower Outreach Chat service.
"""
from .schemas import Borrower, Counters, Message, MessageSender, TurnOutcome, TurnResult

__all__ = ["Borrower", "Counters", "Message", "MessageSender", "TurnOutcome", "TurnResult"]

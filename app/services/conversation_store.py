"""
In-memory conversation store keyed by borrower id.

Created empty at process start and never persisted. Each borrower owns a
disjoint append-only message log and counters, so turns for different
borrowers never touch shared state.
"""
from collections import defaultdict
from typing import Dict, List, Set

from app.models.schemas import ConversationResponse, Counters, Message


class ConversationStore:
    """Append-only per-borrower message logs plus send/receive counters."""

    def __init__(self):
        self._messages: Dict[int, List[Message]] = defaultdict(list)
        self._sent: Dict[int, int] = defaultdict(int)
        self._received: Dict[int, int] = defaultdict(int)
        self._in_flight: Set[int] = set()

    def history(self, borrower_id: int) -> List[Message]:
        """Copy of the borrower's transcript in causal order."""
        return list(self._messages.get(borrower_id, ()))

    def append(self, borrower_id: int, message: Message) -> None:
        self._messages[borrower_id].append(message)

    def counters(self, borrower_id: int) -> Counters:
        return Counters(
            sent=self._sent.get(borrower_id, 0),
            received=self._received.get(borrower_id, 0),
        )

    def record_sent(self, borrower_id: int) -> None:
        self._sent[borrower_id] += 1

    def record_received(self, borrower_id: int) -> None:
        if self._received.get(borrower_id, 0) >= self._sent.get(borrower_id, 0):
            raise ValueError(
                f"Cannot record a reply for borrower {borrower_id} without a preceding send"
            )
        self._received[borrower_id] += 1

    # Single-flight bookkeeping, used by the HTTP layer
    def is_busy(self, borrower_id: int) -> bool:
        return borrower_id in self._in_flight

    def begin_turn(self, borrower_id: int) -> bool:
        """Mark a turn in flight. Returns False if one already is."""
        if borrower_id in self._in_flight:
            return False
        self._in_flight.add(borrower_id)
        return True

    def end_turn(self, borrower_id: int) -> None:
        self._in_flight.discard(borrower_id)

    def snapshot(self, borrower_id: int) -> ConversationResponse:
        return ConversationResponse(
            borrower_id=borrower_id,
            messages=self.history(borrower_id),
            counters=self.counters(borrower_id),
            in_flight=self.is_busy(borrower_id),
        )

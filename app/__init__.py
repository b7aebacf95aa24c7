"""Borrower Outreach Chat

Backend for an operator chat console used in collections outreach:
- Serves a static borrower directory
- Generates AI replies per borrower conversation
- Fans each reply out to WhatsApp and email
- Tracks per-borrower send/receive counters
"""

__version__ = "1.0.0"

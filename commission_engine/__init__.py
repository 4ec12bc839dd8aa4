"""
Multi-level referral commission engine.

Walks a partner's upline chain for a confirmed transaction and records the
commission owed to every qualifying ancestor exactly once.
"""

__version__ = "1.0.0"

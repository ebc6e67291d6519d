"""
Services layer for the order dashboard.

This module contains the business logic services:
- OrderSyncService: Order set owner, refresh / status updates / polling
- FeedbackChannel: Single-slot toast notifications
- DashboardService: View-state (search, tab) and snapshots

Thread Model:
    Main Thread (Flask)
    ├── OrderPoller thread (refresh loop, one per mounted dashboard)
    └── Timer threads (one pending toast dismissal at a time)
"""

from .feedback import FeedbackChannel
from .order_sync_service import OrderSyncService, PollingHandle, SyncState
from .dashboard_service import DashboardService

__all__ = [
    "FeedbackChannel",
    "OrderSyncService",
    "PollingHandle",
    "SyncState",
    "DashboardService",
]

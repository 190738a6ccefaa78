"""
Outbound notifications for newly stored achievement unlocks.

Modules:
    webhook_sender: Concurrent webhook fan-out with per-target failure capture
"""

__all__ = [
    "WebhookNotifier",
]

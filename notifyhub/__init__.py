"""Real-time notification service package.

The HTTP and websocket surface lives in :mod:`notifyhub.interfaces.api`, the
reconnecting websocket client in :mod:`notifyhub.client`.
"""

__version__ = "1.0.0"

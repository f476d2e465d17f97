"""
tg-file-relay: upload media into a Telegram channel and serve it back by file id.
"""

__version__ = "0.3.0"

"""Vendor backend clients."""

from unillm.clients.xai import XAIClient, XAIConfig

__all__ = ["XAIClient", "XAIConfig"]

"""Headless driver for the browser half of the auto-login bridge."""

from .bridge import BridgeState, BrowserBridge
from .network import LogoutObserver, get_logout_observer
from .page import LoginPage, PageButton
from .settings import BridgeClientSettings

__all__ = [
    "BridgeClientSettings",
    "BridgeState",
    "BrowserBridge",
    "LoginPage",
    "LogoutObserver",
    "PageButton",
    "get_logout_observer",
]

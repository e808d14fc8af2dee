# frontend/notifications.py
"""User-facing notifications (fire-and-forget)."""
from typing import Protocol

import streamlit as st


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class StreamlitNotifier:
    """
    Shows notifications as Streamlit toasts.

    Messages are queued in session state and shown by ``flush()`` so a
    toast raised right before ``st.rerun()`` is not lost.
    """

    KEY = "_pending_toasts"

    def success(self, message):
        self._push(message, "✅")

    def error(self, message):
        self._push(message, "❌")

    def _push(self, message, icon):
        st.session_state.setdefault(self.KEY, []).append((message, icon))

    @classmethod
    def flush(cls):
        for message, icon in st.session_state.pop(cls.KEY, []):
            st.toast(message, icon=icon)

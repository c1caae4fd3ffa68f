"""Utility components and helper functions for DBEN UI."""

from fasthtml.common import *
from datetime import datetime, timezone


def format_time_ago(dt, now=None):
    """Format datetime as 'time ago' string."""
    if dt is None:
        return ""
    now = now or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        # Platform timestamps are UTC
        dt = dt.replace(tzinfo=timezone.utc)

    diff = now - dt

    if diff.days > 7:
        return dt.strftime("%b %d, %Y")
    elif diff.days > 0:
        return f"{diff.days}d ago"
    elif diff.seconds > 3600:
        hours = diff.seconds // 3600
        return f"{hours}h ago"
    elif diff.seconds > 60:
        minutes = diff.seconds // 60
        return f"{minutes}m ago"
    else:
        return "just now"


def Alert(message: str, type: str = "info"):
    """Alert component for messages."""
    return Div(
        message,
        cls=f"alert alert-{type}",
        role="alert"
    )


def EmptyState(title: str, description: str, action_text: str = None, action_href: str = None, icon: str = "📚"):
    """Empty state component."""
    action = A(action_text, href=action_href, cls="primary") if action_text and action_href else None

    return Div(
        Div(icon, cls="empty-icon"),
        H3(title),
        P(description),
        action,
        cls="empty-state"
    )


def LoadingIndicator(id: str = "loading-indicator", text: str = "Loading..."):
    """HTMX request indicator, shown while a partial is loading."""
    return Div(
        Div(cls="spinner"),
        text,
        cls="htmx-indicator loading-container",
        id=id
    )

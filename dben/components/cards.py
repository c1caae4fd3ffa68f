"""Card components for DBEN."""

from fasthtml.common import *

from dben.models.entities import AVAILABILITY_LABELS, CONDITION_LABELS
from dben.services.exchanges import ACTION_LABELS, ACTION_TARGETS, exchange_actions
from .utils import format_time_ago


STATUS_ICONS = {
    'pending': '⏳',
    'accepted': '💬',
    'completed': '✅',
    'cancelled': '❌',
}


def AvailabilityBadge(availability_type: str):
    return Span(
        AVAILABILITY_LABELS.get(availability_type, availability_type),
        cls=f"availability-badge availability-{availability_type}"
    )


def StatusBadge(status: str):
    return Span(
        STATUS_ICONS.get(status, ''), " ", status,
        cls=f"status-badge status-{status}"
    )


def BookCover(book, cls="book-cover"):
    if book.cover_image_url:
        return Img(src=book.cover_image_url, alt=book.title, cls=cls, loading="lazy")
    return Div("📚", cls=f"{cls} cover-placeholder")


def BookCard(book):
    """Discover grid card. Clicking it opens the book modal."""
    owner_line = None
    if book.owner:
        owner_line = Div(
            Span(f"@{book.owner.username}", cls="owner-handle"),
            Span(f"{book.owner.reputation_score} pts", cls="owner-points"),
            cls="book-card-owner"
        )

    return Article(
        BookCover(book),
        Div(
            Div(
                H3(book.title, cls="book-title"),
                AvailabilityBadge(book.availability_type),
                cls="book-card-header"
            ),
            P(book.author, cls="book-author"),
            P(f"🏷 {book.genre}", cls="book-genre") if book.genre else None,
            Div(
                Span("📍 Nearby"),
                Span(f"Condition: {CONDITION_LABELS.get(book.condition, book.condition)}"),
                cls="book-card-meta"
            ),
            owner_line,
            cls="book-card-body"
        ),
        hx_get=f"/book/{book.id}",
        hx_target="#modal-container",
        hx_swap="innerHTML",
        cls="book-card",
        id=f"book-{book.id}"
    )


def OwnedBookCard(book):
    """Card on the owner's own list, with delete and availability controls."""
    return Article(
        Div(
            H3(book.title, cls="book-title"),
            Button(
                "🗑",
                hx_post=f"/my-books/{book.id}/delete",
                hx_target=f"#owned-book-{book.id}",
                hx_swap="outerHTML",
                hx_confirm="Are you sure you want to delete this book?",
                cls="delete-book-btn secondary outline",
                title="Delete book"
            ),
            cls="book-card-header"
        ),
        P(book.author, cls="book-author"),
        P(book.genre, cls="book-genre") if book.genre else None,
        Div(
            Span(AVAILABILITY_LABELS.get(book.availability_type, book.availability_type), cls="book-type"),
            Button(
                "Available" if book.is_available else "Unavailable",
                hx_post=f"/my-books/{book.id}/toggle",
                hx_target=f"#owned-book-{book.id}",
                hx_swap="outerHTML",
                cls="availability-toggle " + ("available" if book.is_available else "unavailable"),
                title="Toggle availability"
            ),
            cls="book-card-footer"
        ),
        cls="owned-book-card",
        id=f"owned-book-{book.id}"
    )


def ExchangeCard(exchange, viewer_id: str, tab: str = 'received'):
    """One exchange request, with the actions the viewer is allowed to take."""
    if tab == 'received':
        counterpart_label, counterpart = "From", exchange.requester
    else:
        counterpart_label, counterpart = "To", exchange.owner

    book_title = exchange.book.title if exchange.book else "Unknown book"
    book_author = exchange.book.author if exchange.book else ""

    buttons = [
        Button(
            ACTION_LABELS[action],
            hx_post=f"/exchanges/{exchange.id}/status",
            hx_vals=f'{{"status": "{ACTION_TARGETS[action]}", "tab": "{tab}"}}',
            hx_target="#exchange-list",
            hx_swap="outerHTML",
            cls=f"exchange-action action-{action}" + (" secondary" if action == 'decline' else " primary")
        )
        for action in exchange_actions(exchange, viewer_id)
    ]

    return Article(
        Div(
            Div(
                H3(book_title, cls="exchange-book-title"),
                P(book_author, cls="exchange-book-author") if book_author else None,
            ),
            StatusBadge(exchange.status),
            cls="exchange-card-header"
        ),
        P(
            Strong(f"{counterpart_label}: "),
            counterpart.display_name if counterpart else "Unknown",
            cls="exchange-counterpart"
        ),
        P(Strong("Type: "), Span(exchange.exchange_type.capitalize()), cls="exchange-type"),
        Div(P(exchange.message), cls="exchange-message") if exchange.message else None,
        P(format_time_ago(exchange.created_at), cls="exchange-time") if exchange.created_at else None,
        Div(*buttons, cls="exchange-actions") if buttons else None,
        cls="exchange-card",
        id=f"exchange-{exchange.id}"
    )


def StatCard(value, label: str, icon: str, variant: str = ""):
    return Div(
        Div(icon, cls="stat-icon"),
        Div(str(value), cls="stat-value"),
        Div(label, cls="stat-label"),
        cls=f"stat-card {variant}".strip()
    )

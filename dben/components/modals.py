"""Modal components for DBEN."""

from fasthtml.common import *

from dben.models.entities import AVAILABILITY_LABELS, CONDITION_LABELS
from dben.services.permissions import can_request_book, is_book_owner
from .cards import BookCover
from .forms import ExchangeRequestForm


def ModalCloseButton():
    return Button(
        "×",
        hx_get="/book/close",
        hx_target="#modal-container",
        hx_swap="innerHTML",
        cls="modal-close",
        title="Close"
    )


def BookModal(book, user_id: str = None):
    """Book details with an exchange request form for eligible viewers."""
    details = [
        Div(H4("Author"), P(book.author)),
        Div(H4("Genre"), P(book.genre)) if book.genre else None,
        Div(
            H4("Condition"),
            P(CONDITION_LABELS.get(book.condition, book.condition), cls=f"condition-{book.condition}")
        ),
        Div(H4("Availability"), P(AVAILABILITY_LABELS.get(book.availability_type, book.availability_type))),
        Div(H4("Description"), P(book.description)) if book.description else None,
    ]

    owner_section = None
    if book.owner:
        owner_section = Div(
            H4("Owner"),
            Div(
                Div(
                    P(book.owner.display_name, cls="owner-name"),
                    P(f"@{book.owner.username}", cls="owner-handle"),
                ),
                Span(f"★ {book.owner.reputation_score}", cls="owner-points"),
                cls="owner-row"
            ),
            cls="book-modal-owner"
        )

    if can_request_book(book, user_id):
        request_section = Div(
            Div(id="request-notice"),
            Div(ExchangeRequestForm(book), id="exchange-request")
        )
    elif user_id and is_book_owner(book, user_id):
        request_section = Div(P("This is one of your books.", cls="muted"), id="exchange-request")
    else:
        request_section = None

    return Div(
        Div(
            Div(
                H2(book.title),
                ModalCloseButton(),
                cls="modal-header"
            ),
            Div(
                Div(BookCover(book, cls="book-modal-cover"), cls="book-modal-cover-column"),
                Div(*details, owner_section, cls="book-modal-details"),
                cls="book-modal-body"
            ),
            request_section,
            cls="modal-content"
        ),
        cls="modal-overlay",
        id="book-modal",
        hx_get="/book/close",
        hx_target="#modal-container",
        hx_trigger="click[target.id=='book-modal'], keyup[key=='Escape'] from:body"
    )


def RequestSent(book):
    """Confirmation shown in place of the request form."""
    return Div(
        Div("✅", cls="request-sent-icon"),
        P("Request sent successfully!", cls="request-sent-title"),
        P(f"The owner of {book.title} will be notified.", cls="muted"),
        A("View your requests", href="/exchanges?tab=sent", cls="primary"),
        cls="request-sent"
    )

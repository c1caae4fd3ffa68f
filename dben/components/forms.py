"""Form components for DBEN."""

from fasthtml.common import *
from fasthtml.pico import Card

from dben.models.entities import (
    AVAILABILITY_LABELS, AVAILABILITY_TYPES, CONDITION_LABELS, CONDITIONS
)


def DiscoverSearchForm(query: str = "", availability: str = 'all'):
    """Search box and availability filter; results refresh as the user types."""
    options = [Option("All Types", value="all", selected=(availability == 'all'))]
    options += [
        Option(AVAILABILITY_LABELS[value], value=value, selected=(availability == value))
        for value in AVAILABILITY_TYPES
    ]

    return Form(
        Div(
            Input(
                name="q",
                type="search",
                value=query,
                placeholder="Search by title, author, or genre...",
                cls="discover-search-input"
            ),
            Select(*options, name="availability", cls="discover-filter"),
            cls="discover-search-row"
        ),
        P("📍 Showing books in your area", cls="discover-area"),
        hx_get="/discover/results",
        hx_trigger="input delay:300ms, change, submit",
        hx_target="#book-grid",
        hx_swap="outerHTML",
        hx_indicator="#books-loading",
        action="/discover",
        method="get",
        cls="discover-search-form"
    )


def AddBookToggle():
    """Button that reveals the add-book form."""
    return Div(
        Button(
            "+ Add Book",
            hx_get="/my-books/form",
            hx_target="#add-book-container",
            hx_swap="outerHTML",
            cls="add-book-toggle primary"
        ),
        id="add-book-container"
    )


def AddBookForm():
    """Form for listing a new book."""
    return Div(
        Card(
            H3("Add a New Book"),
            Form(
                Div(
                    Label("Title *", Input(name="title", type="text", required=True, maxlength=200)),
                    Label("Author *", Input(name="author", type="text", required=True, maxlength=200)),
                    Label("Genre", Input(name="genre", type="text", maxlength=100)),
                    Label("Condition *", Select(
                        *[Option(CONDITION_LABELS[value], value=value, selected=(value == 'good'))
                          for value in CONDITIONS],
                        name="condition"
                    )),
                    Label("Availability Type *", Select(
                        *[Option(AVAILABILITY_LABELS[value], value=value, selected=(value == 'lend'))
                          for value in AVAILABILITY_TYPES],
                        name="availability_type"
                    )),
                    cls="add-book-grid"
                ),
                Label("Description", Textarea(name="description", rows=3, maxlength=1000)),
                Div(
                    Button("Add Book", type="submit", cls="primary"),
                    Button(
                        "Cancel",
                        type="button",
                        hx_get="/my-books/form/close",
                        hx_target="#add-book-container",
                        hx_swap="outerHTML",
                        cls="secondary"
                    ),
                    cls="form-actions"
                ),
                action="/my-books/add",
                method="post"
            ),
            cls="add-book-card"
        ),
        id="add-book-container"
    )


def ExchangeRequestForm(book):
    """Message box and request button shown inside the book modal."""
    return Form(
        H3("Request This Book"),
        Textarea(
            name="message",
            placeholder="Add a message to the owner (optional)",
            rows=3,
            maxlength=500
        ),
        Button(
            f"Request to {book.availability_type}",
            type="submit",
            cls="primary request-btn",
            **{"hx-disabled-elt": "this"}
        ),
        hx_post=f"/book/{book.id}/request",
        hx_target="#exchange-request",
        hx_swap="innerHTML",
        cls="exchange-request-form"
    )


def ProfileEditForm(profile):
    """Edit form for the fields a user may change on their own profile."""
    return Form(
        Label("Full Name", Input(name="full_name", type="text", value=profile.full_name or "", maxlength=100)),
        Label("Location", Input(
            name="location_name",
            type="text",
            value=profile.location_name or "",
            placeholder="City, Country",
            maxlength=100
        )),
        Label("Bio", Textarea(profile.bio or "", name="bio", rows=4, maxlength=500)),
        Div(
            Button("Save Changes", type="submit", cls="primary"),
            Button(
                "Cancel",
                type="button",
                hx_get="/profile/cancel",
                hx_target="#profile-details",
                hx_swap="outerHTML",
                cls="secondary"
            ),
            cls="form-actions"
        ),
        hx_post="/profile/update",
        hx_target="#profile-details",
        hx_swap="outerHTML",
        cls="profile-edit-form",
        id="profile-details"
    )

"""Navigation components for DBEN."""

from fasthtml.common import *


NAV_ITEMS = [
    ('discover', "Discover", "/discover"),
    ('my-books', "My Books", "/my-books"),
    ('exchanges', "Exchanges", "/exchanges"),
    ('profile', "Profile", "/profile"),
]


def NavBar(auth=None, current_page: str = None):
    """Main navigation bar with HTMX-powered mobile menu."""
    if auth:
        links = [
            A(label, href=href, cls="nav-link active" if page_id == current_page else "nav-link")
            for page_id, label, href in NAV_ITEMS
        ]
        user_menu = Div(
            Span(auth.get('username') or 'User', cls="nav-user-name"),
            A("Sign out", href="/auth/logout", cls="nav-logout", title="Sign out"),
            cls="nav-user"
        )
    else:
        links = [A("Sign In", href="/auth/login", cls="login-btn")]
        user_menu = None

    return Nav(
        Div(
            A("📖 ", Span("DBEN", cls="logo-text"), href="/", cls="logo"),
            # Desktop menu
            Div(
                *links,
                user_menu,
                cls="user-menu desktop-menu"
            ),
            # Mobile menu button
            Button(
                "☰",
                cls="mobile-menu-toggle",
                **{"hx-on:click": "document.getElementById('mobile-menu').classList.toggle('active')"}
            ),
            cls="nav-container"
        ),
        # Mobile menu (hidden by default)
        Div(
            *links,
            A("Sign Out", href="/auth/logout", cls="nav-logout") if auth else None,
            cls="mobile-menu",
            id="mobile-menu"
        ),
        cls="main-nav"
    )

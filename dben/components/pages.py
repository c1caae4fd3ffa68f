"""Page section components for DBEN."""

from fasthtml.common import *

from dben.services.permissions import can_edit_profile
from .cards import BookCard, ExchangeCard, OwnedBookCard, StatCard
from .utils import EmptyState, LoadingIndicator


def PageHeader(title: str, subtitle: str = None, action=None):
    return Div(
        Div(
            H1(title, cls="page-title"),
            P(subtitle, cls="page-subtitle") if subtitle else None,
        ),
        action,
        cls="page-header"
    )


def LandingPageHero(auth=None):
    """Hero section of the landing page."""
    get_started_href = "/discover" if auth else "/auth/login"
    return Section(
        Div("📖", cls="hero-icon"),
        H1("Decentralized Book Exchange Network", cls="hero-title"),
        P(
            "Connect with local readers. Lend, swap, or give away books. "
            "Build a sustainable reading community.",
            cls="hero-subtitle"
        ),
        A("Get Started →", href=get_started_href, cls="primary hero-cta", role="button"),
        cls="landing-hero"
    )


def FeaturesSection():
    features = [
        ("🔍", "Discover Books Nearby",
         "Find books available in your local area. Browse by genre, condition, and availability type."),
        ("🤝", "Build Trust",
         "Rate exchanges and build your reputation. Connect with reliable readers in your community."),
        ("🌱", "Sustainable Reading",
         "Reduce waste and carbon footprint by sharing books locally. Support quality education."),
    ]
    return Section(
        *[Div(Div(icon, cls="feature-icon"), H3(title), P(text), cls="feature-card")
          for icon, title, text in features],
        cls="features-section"
    )


def HowItWorksSection():
    steps = [
        ("Create Profile", "Sign up and set your location"),
        ("List Books", "Add books you want to share"),
        ("Exchange", "Request and complete exchanges"),
        ("Build Trust", "Rate and earn reputation points"),
    ]
    return Section(
        H2("How It Works", cls="section-title"),
        Div(
            *[Div(Div(str(number), cls="step-number"), H4(title), P(text), cls="step")
              for number, (title, text) in enumerate(steps, start=1)],
            cls="steps-grid"
        ),
        cls="how-it-works-section"
    )


def ImpactSection():
    return Section(
        H2("Our Impact", cls="section-title"),
        P(
            "DBEN supports UN Sustainable Development Goals for Quality Education and "
            "Responsible Consumption. By promoting local book exchanges, we reduce waste, "
            "extend book lifecycles, and foster literacy in communities.",
            cls="impact-text"
        ),
        cls="impact-section"
    )


def UniversalFooter():
    return Footer(
        P("DBEN · Decentralized Book Exchange Network"),
        cls="site-footer"
    )


def BookGrid(books):
    """Discover results. Swapped as a whole when the filters change."""
    if not books:
        content = EmptyState(
            "No books found matching your criteria.",
            "Try adjusting your search or filters.",
            icon="🔍"
        )
    else:
        content = Div(*[BookCard(book) for book in books], cls="book-grid")
    return Div(content, id="book-grid")


def DiscoverResults(books):
    return Div(
        LoadingIndicator("books-loading", "Loading books..."),
        BookGrid(books),
        cls="discover-results"
    )


def OwnedBookList(books):
    if not books:
        return Div(
            EmptyState("You haven't added any books yet.", 'Click "Add Book" to get started!'),
            id="owned-books"
        )
    return Div(*[OwnedBookCard(book) for book in books], cls="owned-book-grid", id="owned-books")


def ExchangeTabs(active_tab: str):
    tabs = [('received', "Received Requests"), ('sent', "Sent Requests")]
    return Div(
        *[A(label, href=f"/exchanges?tab={tab}", cls="exchange-tab active" if tab == active_tab else "exchange-tab")
          for tab, label in tabs],
        cls="exchange-tabs"
    )


def ExchangeList(exchanges, viewer_id: str, tab: str = 'received', notice=None):
    """Exchanges of one tab. Action buttons replace this element with a fresh copy."""
    if not exchanges:
        empty_text = ("No exchange requests received yet" if tab == 'received'
                      else "No exchange requests sent yet")
        body = EmptyState(empty_text, "Requests will show up here.", icon="💬")
    else:
        body = Div(*[ExchangeCard(exchange, viewer_id, tab) for exchange in exchanges], cls="exchange-cards")
    return Div(notice, body, id="exchange-list")


def ProfileHeader(profile, user_id: str = None):
    edit_button = None
    if can_edit_profile(profile, user_id):
        edit_button = Button(
            "Edit Profile",
            hx_get="/profile/edit",
            hx_target="#profile-details",
            hx_swap="outerHTML",
            cls="primary"
        )
    return Div(
        Div(
            Div("👤", cls="profile-avatar"),
            Div(
                H1(profile.display_name, cls="profile-name"),
                P(f"@{profile.username}", cls="profile-handle"),
            ),
            cls="profile-identity"
        ),
        edit_button,
        cls="profile-header"
    )


def ProfileStats(profile):
    return Div(
        StatCard(profile.reputation_score, "Reputation Points", "★", "stat-reputation"),
        StatCard(profile.total_exchanges, "Total Exchanges", "👤", "stat-exchanges"),
        StatCard("Local", "Community Member", "📍", "stat-community"),
        cls="profile-stats"
    )


def ProfileDetails(profile, notice=None):
    """Read-only location and bio, swapped with the edit form."""
    items = []
    if profile.location_name:
        items.append(Div(H4("Location"), P(profile.location_name)))
    if profile.bio:
        items.append(Div(H4("Bio"), P(profile.bio)))
    if not items:
        items.append(P("Add your location and bio to help others connect with you.", cls="muted"))
    return Div(notice, *items, cls="profile-details", id="profile-details")

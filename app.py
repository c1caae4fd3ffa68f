"""Main FastHTML application for DBEN."""

from fasthtml.common import *
from fasthtml.pico import picolink, Container
import os
import logging
from dotenv import load_dotenv

from dben.models import (
    setup_database, DataAccessError, get_profile, update_profile,
    get_available_books, get_book, get_user_books, create_book, delete_book,
    set_book_availability, get_exchanges
)
from dben.services import (
    ExchangeError, PermissionDeniedError, can_edit_book, filter_books,
    normalize_availability, request_exchange, transition_exchange
)
from dben.auth import (
    PlatformAuth, AuthenticationError, auth_beforeware, get_current_user_id
)
from dben.components import (
    NavBar, Alert, EmptyState, PageHeader, LandingPageHero, FeaturesSection,
    HowItWorksSection, ImpactSection, UniversalFooter, DiscoverSearchForm,
    DiscoverResults, BookGrid, BookModal, RequestSent, AddBookToggle, AddBookForm,
    OwnedBookCard, OwnedBookList, ExchangeTabs, ExchangeList, ProfileHeader,
    ProfileStats, ProfileDetails, ProfileEditForm
)
from static_utils import STATIC_DIR, get_css_url

load_dotenv()

logger = logging.getLogger(__name__)

# Created on first request so that importing the app never needs the network config
database = None
platform_auth = None


def get_platform():
    """Return the (database, platform_auth) pair, creating it on first use."""
    global database, platform_auth
    if database is None:
        database = setup_database()
    if platform_auth is None:
        platform_auth = PlatformAuth(database)
    return database, platform_auth


def platform_client(auth):
    """Connection acting as the signed-in user, for use in a ``with`` block."""
    db, _ = get_platform()
    return db.connect_for(auth)


def before_handler(req, sess):
    _, auth_service = get_platform()
    return auth_beforeware(req, sess, auth_service)


app, rt = fast_app(
    before=Beforeware(before_handler, skip=[r'/static/.*', r'/favicon\.ico']),
    htmlkw={'data-theme': 'light'},
    # Session configuration for persistent login
    max_age=30*24*60*60,  # 30 days in seconds
    session_cookie='dben_session',
    same_site='lax',
    sess_https_only=os.getenv('SESSION_HTTPS_ONLY', 'false').lower() == 'true',
    secret_key=os.getenv('SESSION_SECRET'),
    hdrs=(
        picolink,
        Link(rel="stylesheet", href=get_css_url()),
    )
)


def page(title: str, auth, current_page: str, *content):
    """Wrap page content with the title, navigation and footer."""
    return (
        Title(f"{title} - DBEN"),
        NavBar(auth, current_page),
        Container(Div(id="page-notice"), *content),
        UniversalFooter()
    )


def session_notice(sess):
    """Pop a pending error or success message from the session as an Alert."""
    error_msg = sess.pop('error', None)
    if error_msg:
        return Alert(error_msg, "error")
    success_msg = sess.pop('success', None)
    if success_msg:
        return Alert(success_msg, "success")
    return None


def action_failed(message: str, notice_id: str = "page-notice"):
    """Keep the swap target as it is and show the error in a notice slot."""
    return (
        Div(Alert(message, "error"), id=notice_id, hx_swap_oob="true"),
        HttpHeader("HX-Reswap", "none"),
    )


# Static file serving
@rt("/{fname:path}.{ext:static}")
def static_files(fname: str, ext: str):
    return FileResponse(str(STATIC_DIR.parent / f'{fname}.{ext}'))


# Home page
@rt("/")
def index(auth):
    """Landing page; the call to action depends on whether the visitor is signed in."""
    return (
        Title("DBEN - Decentralized Book Exchange Network"),
        NavBar(auth),
        LandingPageHero(auth),
        FeaturesSection(),
        HowItWorksSection(),
        ImpactSection(),
        UniversalFooter()
    )


# Authentication routes
@app.get("/auth/login")
def login_page(sess):
    """Display login form."""
    error_msg = sess.pop('error', None)
    info_msg = sess.pop('info', None)
    _, auth_service = get_platform()
    return auth_service.create_login_form(error_msg, info_msg)


def start_session(sess, auth_data):
    """Store auth data in the session, with the names from the profile row."""
    try:
        with platform_client(auth_data) as client:
            profile = get_profile(client, auth_data['user_id'])
    except DataAccessError:
        profile = None
    if profile:
        auth_data['username'] = profile.username
        auth_data['display_name'] = profile.display_name
    sess['auth'] = auth_data


@app.post("/auth/login")
def login_handler(sess, email: str = "", password: str = ""):
    """Handle login form submission."""
    email = email.strip()
    logger.info(f"Login attempt for {email}")
    if not email or not password:
        sess['error'] = "Please enter your email and password."
        return RedirectResponse('/auth/login', status_code=303)

    _, auth_service = get_platform()
    try:
        auth_data = auth_service.sign_in(email, password)
    except AuthenticationError as e:
        sess['error'] = str(e)
        return RedirectResponse('/auth/login', status_code=303)

    start_session(sess, auth_data)
    logger.info(f"Authentication successful for user: {auth_data['username']}")

    next_url = sess.pop('next_url', None)
    if next_url:
        logger.info(f"Redirecting user {auth_data['username']} to pending URL: {next_url}")
        return RedirectResponse(next_url, status_code=303)
    return RedirectResponse('/discover', status_code=303)


@app.get("/auth/signup")
def signup_page(sess):
    error_msg = sess.pop('error', None)
    _, auth_service = get_platform()
    return auth_service.create_signup_form(error_msg)


@app.post("/auth/signup")
def signup_handler(sess, email: str = "", password: str = "", username: str = "", full_name: str = ""):
    """Handle sign-up form submission."""
    email = email.strip()
    username = username.strip()
    if not email or not password or not username:
        sess['error'] = "Email, password and username are required."
        return RedirectResponse('/auth/signup', status_code=303)

    _, auth_service = get_platform()
    try:
        auth_data = auth_service.sign_up(email, password, username, full_name)
    except AuthenticationError as e:
        sess['error'] = str(e)
        return RedirectResponse('/auth/signup', status_code=303)

    if auth_data is None:
        sess['info'] = "Check your email to confirm your account, then sign in."
        return RedirectResponse('/auth/login', status_code=303)

    start_session(sess, auth_data)
    logger.info(f"New account created: {auth_data['username']}")
    return RedirectResponse('/discover', status_code=303)


@rt("/auth/logout")
def logout_handler(auth, sess):
    """Handle logout."""
    _, auth_service = get_platform()
    auth_service.sign_out(auth)
    sess.clear()
    return RedirectResponse('/', status_code=303)


# Discover
@rt("/discover")
def discover_page(auth, q: str = "", availability: str = "all"):
    """Search every available book, filtered by text and availability type."""
    availability = normalize_availability(availability)
    try:
        with platform_client(auth) as client:
            books = get_available_books(client)
        results = DiscoverResults(filter_books(books, q, availability))
    except DataAccessError as e:
        results = Div(Alert(str(e), "error"), id="book-grid")

    return page(
        "Discover Books", auth, 'discover',
        PageHeader("Discover Books", "Find books available in your community"),
        DiscoverSearchForm(q, availability),
        results,
        Div(id="modal-container")
    )


@rt("/discover/results")
def discover_results(auth, q: str = "", availability: str = "all"):
    """HTMX endpoint for live filtering of the discover grid."""
    try:
        with platform_client(auth) as client:
            books = get_available_books(client)
    except DataAccessError as e:
        return action_failed(str(e))
    return BookGrid(filter_books(books, q, availability))


# Book modal and exchange requests
@rt("/book/close")
def close_book_modal():
    return ""


@rt("/book/{book_id}")
def book_modal(book_id: str, auth):
    """HTMX endpoint for the book details modal."""
    try:
        with platform_client(auth) as client:
            book = get_book(client, book_id)
    except DataAccessError as e:
        return action_failed(str(e))
    if not book:
        return action_failed("Book not found.")
    return BookModal(book, get_current_user_id(auth))


@rt("/book/{book_id}/request", methods=["POST"])
def request_book(book_id: str, auth, message: str = ""):
    """Create an exchange request and replace the form with a confirmation."""
    user_id = get_current_user_id(auth)
    try:
        with platform_client(auth) as client:
            book = get_book(client, book_id)
            if not book:
                return action_failed("Book not found.", "request-notice")
            request_exchange(client, book, user_id, message)
    except (ExchangeError, PermissionDeniedError) as e:
        logger.warning(f"Exchange request for book {book_id} by {user_id} refused: {e}")
        return action_failed(str(e), "request-notice")
    except DataAccessError as e:
        return action_failed(str(e), "request-notice")
    return RequestSent(book)


# My books
@rt("/my-books")
def my_books_page(auth, sess):
    """The signed-in user's own books."""
    notice = session_notice(sess)
    try:
        with platform_client(auth) as client:
            books = OwnedBookList(get_user_books(client, get_current_user_id(auth)))
    except DataAccessError as e:
        books = Alert(str(e), "error")

    return page(
        "My Books", auth, 'my-books',
        PageHeader("My Books", "Manage your book collection"),
        notice,
        AddBookToggle(),
        books
    )


@rt("/my-books/form")
def add_book_form():
    return AddBookForm()


@rt("/my-books/form/close")
def close_add_book_form():
    return AddBookToggle()


@rt("/my-books/add", methods=["POST"])
def add_book(auth, sess, title: str = "", author: str = "", genre: str = "",
             condition: str = "good", availability_type: str = "lend", description: str = ""):
    """Handle the add-book form."""
    try:
        with platform_client(auth) as client:
            create_book(
                client,
                owner_id=get_current_user_id(auth),
                title=title,
                author=author,
                genre=genre,
                condition=condition,
                availability_type=availability_type,
                description=description,
            )
    except (ValueError, DataAccessError) as e:
        sess['error'] = str(e)
    else:
        sess['success'] = f"'{title.strip()}' has been added to your books."
    return RedirectResponse('/my-books', status_code=303)


def owned_book_or_error(client, book_id: str, user_id: str):
    """Return (book, None), or (None, message) when the user may not change it."""
    book = get_book(client, book_id)
    if not book:
        return None, "Book not found."
    if not can_edit_book(book, user_id):
        logger.warning(f"User {user_id} tried to modify book {book_id} they do not own")
        return None, "You can only change your own books."
    return book, None


@rt("/my-books/{book_id}/delete", methods=["POST"])
def remove_book(book_id: str, auth):
    """Delete a book; the card is replaced with nothing."""
    user_id = get_current_user_id(auth)
    try:
        with platform_client(auth) as client:
            book, error = owned_book_or_error(client, book_id, user_id)
            if error:
                return action_failed(error)
            if not delete_book(client, book.id, user_id):
                return action_failed("Book could not be deleted.")
    except DataAccessError as e:
        return action_failed(str(e))
    logger.info(f"Book {book_id} deleted by {user_id}")
    return ""


@rt("/my-books/{book_id}/toggle", methods=["POST"])
def toggle_book(book_id: str, auth):
    """Flip a book between available and unavailable."""
    user_id = get_current_user_id(auth)
    try:
        with platform_client(auth) as client:
            book, error = owned_book_or_error(client, book_id, user_id)
            if error:
                return action_failed(error)
            updated = set_book_availability(client, book.id, user_id, not book.is_available)
    except DataAccessError as e:
        return action_failed(str(e))
    if not updated:
        return action_failed("Book could not be updated.")
    return OwnedBookCard(updated)


# Exchanges
def exchange_tab(tab: str) -> str:
    return tab if tab in ('received', 'sent') else 'received'


@rt("/exchanges")
def exchanges_page(auth, tab: str = "received"):
    """Received and sent exchange requests."""
    tab = exchange_tab(tab)
    user_id = get_current_user_id(auth)
    try:
        with platform_client(auth) as client:
            content = ExchangeList(get_exchanges(client, user_id, tab), user_id, tab)
    except DataAccessError as e:
        content = Div(Alert(str(e), "error"), id="exchange-list")

    return page(
        "Exchanges", auth, 'exchanges',
        PageHeader("Exchanges", "Manage your book exchange requests"),
        ExchangeTabs(tab),
        content
    )


@rt("/exchanges/{exchange_id}/status", methods=["POST"])
def update_exchange(exchange_id: str, auth, status: str = "", tab: str = "received"):
    """Apply accept/decline/complete and re-render the current tab."""
    tab = exchange_tab(tab)
    user_id = get_current_user_id(auth)

    notice = None
    try:
        with platform_client(auth) as client:
            try:
                transition_exchange(client, exchange_id, user_id, status)
            except (ExchangeError, PermissionDeniedError) as e:
                logger.warning(f"Exchange {exchange_id} status change to {status} by {user_id} refused: {e}")
                notice = Alert(str(e), "error")
            except DataAccessError as e:
                notice = Alert(str(e), "error")
            exchanges = get_exchanges(client, user_id, tab)
    except DataAccessError as e:
        return action_failed(str(e))
    return ExchangeList(exchanges, user_id, tab, notice=notice)


# Profile
def load_own_profile(auth):
    with platform_client(auth) as client:
        return get_profile(client, get_current_user_id(auth))


@rt("/profile")
def profile_page(auth):
    """The signed-in user's profile."""
    try:
        profile = load_own_profile(auth)
    except DataAccessError as e:
        return page("Profile", auth, 'profile', Alert(str(e), "error"))

    if not profile:
        return page(
            "Profile", auth, 'profile',
            EmptyState("Profile not found", "Your profile is still being set up. Try again in a moment.", icon="👤")
        )

    return page(
        "Profile", auth, 'profile',
        ProfileHeader(profile, get_current_user_id(auth)),
        ProfileStats(profile),
        ProfileDetails(profile)
    )


@rt("/profile/edit")
def profile_edit(auth):
    try:
        profile = load_own_profile(auth)
    except DataAccessError as e:
        return action_failed(str(e))
    if not profile:
        return action_failed("Profile not found.")
    return ProfileEditForm(profile)


@rt("/profile/cancel")
def profile_cancel(auth):
    try:
        profile = load_own_profile(auth)
    except DataAccessError as e:
        return action_failed(str(e))
    if not profile:
        return action_failed("Profile not found.")
    return ProfileDetails(profile)


@rt("/profile/update", methods=["POST"])
def profile_update(auth, sess, full_name: str = "", location_name: str = "", bio: str = ""):
    """Save profile edits and swap back to the read-only view.

    On failure the edit form stays in place with what the user typed.
    """
    user_id = get_current_user_id(auth)
    try:
        with platform_client(auth) as client:
            profile = update_profile(client, user_id, full_name=full_name, bio=bio, location_name=location_name)
    except DataAccessError as e:
        return action_failed(str(e))
    if not profile:
        return action_failed("Profile could not be updated.")

    # Keep the navigation name in step with the profile
    if auth:
        auth['display_name'] = profile.display_name
        sess['auth'] = auth
    logger.info(f"Profile updated for {user_id}")
    return ProfileDetails(profile, notice=Alert("Profile updated.", "success"))

"""
DBEN UI Components Package.

This package contains all reusable UI components for the DBEN application,
organized by category.

All components are re-exported here for easy importing:
    from dben.components import NavBar, BookCard, BookModal
"""

# Navigation components
from .navigation import NavBar, NAV_ITEMS

# Utility components and helpers
from .utils import (
    format_time_ago,
    Alert,
    EmptyState,
    LoadingIndicator,
)

# Form components
from .forms import (
    DiscoverSearchForm,
    AddBookToggle,
    AddBookForm,
    ExchangeRequestForm,
    ProfileEditForm,
)

# Card components
from .cards import (
    AvailabilityBadge,
    StatusBadge,
    BookCover,
    BookCard,
    OwnedBookCard,
    ExchangeCard,
    StatCard,
)

# Modal components
from .modals import (
    BookModal,
    RequestSent,
)

# Page section components
from .pages import (
    PageHeader,
    LandingPageHero,
    FeaturesSection,
    HowItWorksSection,
    ImpactSection,
    UniversalFooter,
    BookGrid,
    DiscoverResults,
    OwnedBookList,
    ExchangeTabs,
    ExchangeList,
    ProfileHeader,
    ProfileStats,
    ProfileDetails,
)

__all__ = [
    # Navigation
    'NavBar',
    'NAV_ITEMS',
    # Utils
    'format_time_ago',
    'Alert',
    'EmptyState',
    'LoadingIndicator',
    # Forms
    'DiscoverSearchForm',
    'AddBookToggle',
    'AddBookForm',
    'ExchangeRequestForm',
    'ProfileEditForm',
    # Cards
    'AvailabilityBadge',
    'StatusBadge',
    'BookCover',
    'BookCard',
    'OwnedBookCard',
    'ExchangeCard',
    'StatCard',
    # Modals
    'BookModal',
    'RequestSent',
    # Pages
    'PageHeader',
    'LandingPageHero',
    'FeaturesSection',
    'HowItWorksSection',
    'ImpactSection',
    'UniversalFooter',
    'BookGrid',
    'DiscoverResults',
    'OwnedBookList',
    'ExchangeTabs',
    'ExchangeList',
    'ProfileHeader',
    'ProfileStats',
    'ProfileDetails',
]

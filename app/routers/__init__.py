# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - appearance.py: home page, contact block, site appearance
# - fruits.py: fruit catalog and variety management
# - news.py: news articles
# - events.py: events and the admin calendar
# - planifruits.py: maturity-calendar charts
# - media.py: image, PDF and video uploads (admin)
# - diagnostics.py: Supabase connection diagnostics (admin)
# - health.py: health check endpoints
#
# Feature modules expose `router` (public pages) and/or `admin_router`
# (mounted under /api/v1/admin/dashboard behind the admin session).
# =============================================================================

from . import appearance
from . import diagnostics
from . import events
from . import fruits
from . import health
from . import media
from . import news
from . import planifruits

__all__ = [
    "appearance",
    "diagnostics",
    "events",
    "fruits",
    "health",
    "media",
    "news",
    "planifruits",
]

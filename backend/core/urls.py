"""
Core app URL configuration.

URL prefix (registered in ``backend/urls.py``)::

    path('api/', include('core.urls'))

Endpoint summary
----------------
GET    /api/dashboard/stats/                 — Role-aware dashboard counters.
GET    /api/notifications/                   — Newest notifications for the caller.
POST   /api/notifications/                   — Create a notification (internal).
PATCH  /api/notifications/{id}/read/         — Mark a single notification as read.
PATCH  /api/notifications/mark-all-read/     — Mark every notification as read.
DELETE /api/notifications/{id}/              — Delete a notification.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

app_name = "core"

# ── Router for ViewSet-based endpoints ───────────────────────────────
router = DefaultRouter()
router.register(
    prefix=r"notifications",
    viewset=views.NotificationViewSet,
    basename="notification",
)

urlpatterns = [
    # ── Dashboard ────────────────────────────────────────────────────
    path(
        "dashboard/stats/",
        views.DashboardStatsView.as_view(),
        name="dashboard-stats",
    ),

    # ── Notifications (router-generated URLs) ────────────────────────
    path("", include(router.urls)),
]

"""
Cases app URL configuration.

All routes are registered under the ``/api/`` prefix.

Route Hierarchy
---------------
  /api/cases/                             → list / create
  /api/cases/{id}/                        → retrieve / partial_update (drafts)

  ── Workflow @actions (resource-level RPC) ──────────────────────
  POST  /api/cases/{id}/submit/            → client submits draft
  POST  /api/cases/{id}/review/            → police starts review
  PATCH /api/cases/{id}/approve/           → police approves (pnr, hearing_date)
  PATCH /api/cases/{id}/reject/            → police rejects (reason)

  ── Sub-resource @actions ───────────────────────────────────────
  GET  /api/cases/{id}/status-log/
  POST /api/cases/{id}/documents/

  ── Police station directory ────────────────────────────────────
  GET  /api/police-stations/?city=
"""

from rest_framework.routers import DefaultRouter

from .views import CaseViewSet, PoliceStationViewSet

router = DefaultRouter()
router.register(
    prefix=r"cases",
    viewset=CaseViewSet,
    basename="case",
)
router.register(
    prefix=r"police-stations",
    viewset=PoliceStationViewSet,
    basename="police-station",
)

urlpatterns = router.urls

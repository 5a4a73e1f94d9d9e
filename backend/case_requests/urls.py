"""
Case requests app URL configuration.

Route Hierarchy
---------------
  GET   /api/case-requests/               → list (?status=)
  POST  /api/case-requests/               → create
  GET   /api/case-requests/{id}/          → retrieve
  PATCH /api/case-requests/{id}/          → {status, lawyer_response}
  POST  /api/case-requests/{id}/accept/   → lawyer accepts
  POST  /api/case-requests/{id}/reject/   → lawyer rejects
"""

from rest_framework.routers import DefaultRouter

from .views import CaseRequestViewSet

router = DefaultRouter()
router.register(
    prefix=r"case-requests",
    viewset=CaseRequestViewSet,
    basename="case-request",
)

urlpatterns = router.urls

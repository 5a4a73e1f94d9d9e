"""
Messaging app URL configuration.

Route Hierarchy
---------------
  GET   /api/messages/?other_user_id=&case_id=  → list
  POST  /api/messages/                          → send
  PATCH /api/messages/{id}/read/                → mark read (receiver only)
  PATCH /api/messages/mark-conversation-read/   → mark thread read
"""

from rest_framework.routers import DefaultRouter

from .views import MessageViewSet

router = DefaultRouter()
router.register(
    prefix=r"messages",
    viewset=MessageViewSet,
    basename="message",
)

urlpatterns = router.urls

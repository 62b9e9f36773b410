"""
User API URLs

All routes are relative to /api/user/
"""
from django.urls import path

from . import views

urlpatterns = [
    path('profile', views.UserProfileView.as_view(), name='user_profile'),
    path('theme', views.UserThemeView.as_view(), name='user_theme'),
    path('avatar', views.UserAvatarView.as_view(), name='user_avatar'),
]


# Admin API URLs (relative to /api/admin/)
admin_urlpatterns = [
    path('invite', views.InviteView.as_view(), name='admin_invite'),
    path('invite-pin', views.InvitePinView.as_view(), name='admin_invite_pin'),
]

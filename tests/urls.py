from django.urls import include, path

urlpatterns = [
    path("", include("role_user_manager.urls")),
]

from django.urls import path
from .views import CurrentUserView, LoginView, RegistrationView

urlpatterns = [
    path("auth/register/", RegistrationView.as_view(), name="registration"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/me/", CurrentUserView.as_view(), name="current-user"),
]

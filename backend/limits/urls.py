# limits/urls.py
from django.urls import path

from .views import BucketsView

app_name = "limits"

urlpatterns = [
    path("buckets/", BucketsView.as_view(), name="buckets"),
]

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include
from inspections import views as inspection_views

urlpatterns = [
    path("admin/", admin.site.urls),

    # Health endpoint
    path("health/", inspection_views.health, name="health"),

    # Inspection portal
    path("", include("inspections.urls")),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

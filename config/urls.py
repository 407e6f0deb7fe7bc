"""
Root URL configuration.
"""
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from shared.interfaces.health_views import (
    HealthCheckView,
    LivenessCheckView,
    ReadinessCheckView,
)

urlpatterns = [
    path('admin/', admin.site.urls),

    # Health probes
    path('health/', HealthCheckView.as_view(), name='health'),
    path('health/ready/', ReadinessCheckView.as_view(), name='health-ready'),
    path('health/live/', LivenessCheckView.as_view(), name='health-live'),

    # API
    path('api/v1/categories/', include('modules.categories.urls')),
    path('api/v1/products/', include('modules.products.urls')),
    path('api/v1/search/', include('modules.search.urls')),

    # OpenAPI
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from dues.views import DueTypeViewSet, DueViewSet, PaymentSubmissionViewSet

router = DefaultRouter()
router.register(r'due-types', DueTypeViewSet, basename='due-type')
router.register(r'dues', DueViewSet, basename='due')
router.register(r'payments', PaymentSubmissionViewSet, basename='payment')

urlpatterns = [
    path('', include(router.urls)),
]

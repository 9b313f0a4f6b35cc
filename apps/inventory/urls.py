"""
URL configuration for inventory app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    path("api/products/<str:product_code>/", views.product_detail, name="product_detail"),
    path("api/qr/<str:product_code>/", views.product_qr_code, name="product_qr_code"),
    path("api/labels/pdf/", views.label_sheet_pdf, name="label_sheet_pdf"),
]

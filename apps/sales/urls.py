"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    path("api/sales/checkout/", views.checkout, name="checkout"),
    path("api/sales/<uuid:sale_id>/", views.sale_detail, name="sale_detail"),
    path("api/sales/<uuid:sale_id>/payment/", views.update_payment, name="update_payment"),
    path("api/sales/<uuid:sale_id>/invoice.pdf", views.invoice_pdf, name="invoice_pdf"),
]

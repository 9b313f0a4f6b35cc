"""
Sales app for the billing counter.

Checkout with atomic stock decrement, later payment updates and tax invoice
PDFs.
"""

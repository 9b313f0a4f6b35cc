"""
Inventory app for the shop counter.

Product catalog records, the stock store used by checkout, barcode/QR
encoders and printable label sheets.
"""

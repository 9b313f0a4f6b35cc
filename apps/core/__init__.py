"""
Core app: shared building blocks for the shop counter.

Provides the error taxonomy, the REST exception handler, the injectable
clock, shop identity and money/date formatting used by the other apps.
"""

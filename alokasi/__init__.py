"""
Alokasi Pendapatan - Source Package

A household budget tracker: one month's income, the expenses drawn
against it, category totals and a shareable report image.

DESIGN PRINCIPLES:
1. One session owns all state; the UI only issues commands
2. Every change is saved immediately
3. Loading never fails; bad fields fall back to defaults
4. Derived totals are recomputed, never stored
5. Storage and share targets are swappable
"""

__version__ = "1.0.0"
__author__ = "Alokasi Pendapatan Team"

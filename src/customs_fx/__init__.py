"""
Customs FX Dashboard

Weekly import/export exchange rates published by the Korea Customs Service,
normalized into a static JSON snapshot for the dashboard frontend.
"""

__version__ = "1.2.0"

"""
GovServe Root URL Configuration
No HTTP surface yet; the orders core is called in-process.
"""

urlpatterns = []

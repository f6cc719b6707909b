"""
Churn Recipe

Leakage-free feature preparation and evaluation for customer churn models.
"""

__version__ = "1.0.0"
__author__ = "Churn Analytics Team"

"""
Freight rate aggregation and commission tracking service.
"""

"""
HTTP transport for the payment instruction service.
"""

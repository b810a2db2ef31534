"""
Services.

Deposit pipeline and the adapters for its external collaborators.
"""

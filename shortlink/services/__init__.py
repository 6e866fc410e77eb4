"""
Services module for business logic separation.

This module contains the service classes used by the API layer, keeping
short code generation and registry orchestration out of the endpoints.
"""

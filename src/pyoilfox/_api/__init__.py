"""Endpoint modules for the OilFox REST API."""

"""Pydantic schemas for the BlogPress API."""

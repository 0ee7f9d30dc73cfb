"""Pydantic request/response schemas for the Measurebook API."""

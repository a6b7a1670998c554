"""Pydantic models for progression state and static catalogs"""

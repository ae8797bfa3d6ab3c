"""
Data Models Module
----------------
Contains Pydantic models for data validation and serialization.
Defines address items, the persisted store document and API payloads.
"""

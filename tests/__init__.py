"""
Tests for the address mapper
"""

"""
Storage Module
-------------
Persists the address list as a single JSON document.
The file is overwritten wholesale on save and read wholesale on load; the last write wins.
"""

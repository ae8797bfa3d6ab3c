"""
API Module
---------
Provides the HTTP endpoints used by the map page, built with FastAPI.
Features include:
- Proxying Nominatim, Georef and Overpass lookups
- Saving and loading the address list
- Batch geocoding and merged map labels
"""

"""
Geocoding Module
--------------
Forward, reverse and cross-street lookups against public APIs.
Nominatim (OpenStreetMap) and Georef (datos.gob.ar) resolve addresses and
intersections, Overpass supplies the road network around a point, and Mapbox
is available when a token is configured.
"""

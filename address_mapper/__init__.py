"""
Address Mapper
--------------
Geocodes free-text addresses, derives cross-street labels and merges nearby
map labels. Backed by Nominatim, Georef and Overpass.
"""

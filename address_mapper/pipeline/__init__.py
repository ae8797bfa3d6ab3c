"""
Pipeline Module
-------------
Turns raw input lines into located address items.
Items are geocoded strictly one after another, then enriched with reverse
geocoding and cross streets.
"""

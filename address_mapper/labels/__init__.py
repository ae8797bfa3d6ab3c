"""
Labels Module
-----------
Screen-space label merging for the map view.
Projects located items with Web Mercator, groups points that land within a few
pixels of each other and places one combined label per group.
"""

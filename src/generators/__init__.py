"""
Generators package: room tiles and layout search.
"""

"""
HTTP API for the graph recommender.
"""

"""
Register data models and value normalization.
"""

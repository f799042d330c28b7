"""
Core pipeline: translation, validation, marketplace resolution, tracking
and updates.
"""

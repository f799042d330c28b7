"""
Data models for pluginx.
"""

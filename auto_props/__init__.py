"""
auto_props: generate runtime prop/event declarations for typed Vue components.
"""

__version__ = "0.3.0"

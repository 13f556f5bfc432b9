"""
luasketch: live Lua drawing scripts in a pygame window.

A script is loaded into an embedded Lua interpreter, given a small
drawing and sprite API, and resumed once per rendered frame.
"""

__version__ = "0.1.0"

"""
Developer command-line tools for tierdrop.

- simulate: replay a drop plan against an in-memory collection and a manual clock
"""

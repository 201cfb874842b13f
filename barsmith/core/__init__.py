# barsmith/core/__init__.py
"""Core of barsmith: context loading, template rendering and the render pipeline."""

# barsmith/__init__.py
"""barsmith: render Handlebars templates against merged JSON/YAML/plist context."""
import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

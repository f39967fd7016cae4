"""Federation discovery responder: well-known, public rooms and alias lookups."""

__version__ = "0.1.0"

"""Domain applications of the vendorbook booking engine."""

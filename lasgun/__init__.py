"""Scene description, geometry, materials, lights and ray intersection for a ray tracer."""

__version__ = "0.1.0"
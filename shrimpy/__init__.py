"""Path tracer scene building: vectors, scene types, BVH, OBJ loading and image output."""

__version__ = "0.1.0"
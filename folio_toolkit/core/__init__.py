"""GUI-agnostic packaging pipeline: filtering, slugs, resources, rendering, archiving."""

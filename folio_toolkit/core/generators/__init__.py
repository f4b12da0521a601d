from .manifest_builder import GuideReference, Manifest, ManifestBuilder, ManifestItem, NavPoint

__all__ = [
    "GuideReference",
    "Manifest",
    "ManifestBuilder",
    "ManifestItem",
    "NavPoint",
]

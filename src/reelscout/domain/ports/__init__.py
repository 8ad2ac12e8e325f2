from .metadata import MetadataProviderPort, ProviderPage

__all__ = [
    "MetadataProviderPort",
    "ProviderPage",
]

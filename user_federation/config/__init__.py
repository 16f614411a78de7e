"""Configuration module for the remote user federation bridge."""
from .settings import DirectoryClientConfig, load_settings

__all__ = ["DirectoryClientConfig", "load_settings"]

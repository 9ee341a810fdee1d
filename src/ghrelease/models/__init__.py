"""Data models for github-release."""

from ghrelease.models.release import Asset, Commit, LightweightTag, Release, Tag

__all__ = ["Asset", "Commit", "LightweightTag", "Release", "Tag"]

from .enums import AuthProvider, Difficulty, ResourceType, SortOrder

__all__ = ["AuthProvider", "Difficulty", "ResourceType", "SortOrder"]

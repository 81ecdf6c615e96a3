from freight_portal.infrastructure.repositories.profiles import ProfileRepository, profile_model

__all__ = ["ProfileRepository", "profile_model"]

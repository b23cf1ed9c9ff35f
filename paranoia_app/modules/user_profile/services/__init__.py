from .profile_service import UserProfileService

__all__ = ['UserProfileService']

from dataclasses import dataclass

from loguru import logger

from .identity import Identity, ProviderProfile


@dataclass(frozen=True)
class AllowList:
    """Static set of lower-case emails allowed to log in."""

    emails: frozenset[str]

    @classmethod
    def from_csv(cls, value: str) -> "AllowList":
        return cls(frozenset(x.strip().lower() for x in value.split(",") if x.strip()))

    def is_allowed(self, email: str | None) -> bool:
        if not email:
            return False
        return email.strip().lower() in self.emails


def authorize_profile(profile: ProviderProfile, allow_list: AllowList) -> Identity | None:
    """Approve a provider profile, or return None when its email is not on the allow-list."""
    email = profile.email.strip().lower()
    if not allow_list.is_allowed(email):
        logger.info("Login denied for unlisted email (user_id={})", profile.id)
        return None

    return Identity(user_id=profile.id, display_name=profile.display_name, email=email)

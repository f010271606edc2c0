from typing import Optional

from ..config import settings


def is_admin(email: Optional[str], admin_email: Optional[str] = None) -> bool:
    """The single admin account is identified by email."""
    if not email:
        return False
    return email.strip().lower() == (admin_email or settings.admin_email).lower()

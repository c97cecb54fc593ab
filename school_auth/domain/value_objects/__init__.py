"""Domain value objects."""

from school_auth.domain.value_objects.credential import Credential
from school_auth.domain.value_objects.device_summary import DeviceSummary
from school_auth.domain.value_objects.email import EmailAddress

__all__ = ["Credential", "DeviceSummary", "EmailAddress"]

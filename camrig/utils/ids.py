"""Random hash identifiers for cameras, rigs and frames."""

import uuid
from dataclasses import dataclass


_INVALID = ""


@dataclass(frozen=True)
class HashId:
    """
    128-bit random identifier stored as a 32 character hex string.

    Ids of different subclasses never compare equal, so a CameraId can not be
    mistaken for a FrameId carrying the same value.
    """

    value: str = _INVALID

    def __post_init__(self):
        value = str(self.value).lower()
        if value and (len(value) != 32 or any(c not in "0123456789abcdef" for c in value)):
            raise ValueError(f"{type(self).__name__} must be 32 hex characters, got '{self.value}'")
        object.__setattr__(self, "value", value)

    @classmethod
    def random(cls) -> "HashId":
        """Create a new random id."""
        return cls(uuid.uuid4().hex)

    def is_valid(self) -> bool:
        return self.value != _INVALID

    def short(self) -> str:
        """First eight characters, for diagnostics."""
        return self.value[:8] if self.is_valid() else "<invalid>"

    def __str__(self) -> str:
        return self.value if self.is_valid() else "<invalid>"


class CameraId(HashId):
    pass


class NCameraId(HashId):
    pass


class FrameId(HashId):
    pass


class NFramesId(HashId):
    pass

from enum import Enum


class AspectRatioMode(str, Enum):
    LETTERBOX = "letterbox"  # keep source aspect, pad to the target box
    CROP = "crop"  # keep source aspect, crop to fill the target box
    NONE = "none"  # stretch to the target box

    @classmethod
    def parse(cls, value) -> "AspectRatioMode":
        try:
            return cls(value)
        except ValueError:
            return cls.NONE

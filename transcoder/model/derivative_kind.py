from enum import Enum


class DerivativeKind(str, Enum):
    VIDEO = "video"
    THUMBNAIL = "thumbnail"

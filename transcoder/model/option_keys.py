FRAME_RATE = "frameRate"
BIT_RATE = "bitRate"
WIDTH = "width"
HEIGHT = "height"
ASPECT_RATIO = "aspectRatio"
LETTERBOX_COLOR = "letterboxColor"
SHARPEN = "sharpen"
TIME_IN_SECS = "timeInSecs"
FILE_SUFFIX = "fileSuffix"

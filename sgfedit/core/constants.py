BOARD_SIZE_MIN = 1
BOARD_SIZE_MAX = 52  # limit of the SGF letter encoding a..zA..Z
DEFAULT_BOARD_SIZE = 19
PASS_AS_TT_MAX_SIZE = 19  # B[tt]/W[tt] mean pass on boards up to this size
PASS_AS_TT_COORD = (19, 19)

DEFAULT_ENCODING = "UTF-8"
ENCODING_SNIFF_BYTES = 300

SGF_LINE_CHARS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

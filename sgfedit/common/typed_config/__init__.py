# sgfedit/common/typed_config - typed config accessors
#
# Config sections are frozen dataclasses, read through TypedConfigReader.get_<section>().

from sgfedit.common.typed_config.models import (
    BoardConfig,
    FileConfig,
    safe_board_size,
    safe_bool,
    safe_int,
    safe_str,
)
from sgfedit.common.typed_config.reader import TypedConfigReader

__all__ = [
    # Dataclasses
    "BoardConfig",
    "FileConfig",
    # Reader
    "TypedConfigReader",
    # Helper functions
    "safe_int",
    "safe_bool",
    "safe_str",
    "safe_board_size",
]

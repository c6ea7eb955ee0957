# sgfedit/common/typed_config/reader.py
#
# TypedConfigReader - typed access to config sections.

from typing import Any

from sgfedit.common.typed_config.models import BoardConfig, FileConfig


class TypedConfigReader:
    """Typed config reader.

    Calls ``from_dict()`` on every access, so it always reflects the current
    contents of the wrapped dict. Section dicts are copied before parsing.

    Usage:
        reader = TypedConfigReader(config_dict)
        board = reader.get_board()  # BoardConfig
        files = reader.get_files()  # FileConfig
    """

    def __init__(self, config_dict: dict[str, Any] | None = None) -> None:
        """Keeps a reference to the config dict (no copy)."""
        self._config = config_dict if config_dict is not None else {}

    def get_board(self) -> BoardConfig:
        raw = self._config.get("board")
        snapshot = dict(raw) if isinstance(raw, dict) else {}
        return BoardConfig.from_dict(snapshot)

    def get_files(self) -> FileConfig:
        raw = self._config.get("files")
        snapshot = dict(raw) if isinstance(raw, dict) else {}
        return FileConfig.from_dict(snapshot)

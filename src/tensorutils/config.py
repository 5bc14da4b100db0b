"""Runtime configuration for tensorutils."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields

_BYTEORDERS = {"little": "<", "big": ">", "native": "="}


@dataclass
class TensorUtilsConfig:
    """Settings used by the file formats.

    Attributes:
        byteorder: Byte order of binary files: "little", "big" or "native".
            ``.f80`` files are always written in native order.
        text_extension: Extension that selects the text format.
    """

    byteorder: str = "little"
    text_extension: str = ".txt"

    def __post_init__(self):
        if self.byteorder not in _BYTEORDERS:
            raise ValueError(
                f"byteorder must be one of {sorted(_BYTEORDERS)}, got {self.byteorder!r}"
            )
        if not self.text_extension.startswith("."):
            self.text_extension = "." + self.text_extension
        self.text_extension = self.text_extension.lower()

    @property
    def byteorder_char(self) -> str:
        """The numpy byte-order character for :attr:`byteorder`."""
        return _BYTEORDERS[self.byteorder]

    @classmethod
    def load(cls, config_path: str) -> "TensorUtilsConfig":
        """Load the configuration from the "tensorutils" table of a TOML file.

        Missing keys keep their defaults.

        Args:
            config_path: Path to the TOML file

        Returns:
            The loaded configuration

        Raises:
            FileNotFoundError: If no file exists at ``config_path``
            ValueError: If the table holds unknown keys or an invalid value
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found at {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        section = data.get("tensorutils", {})
        known = {f.name for f in fields(cls)}
        unknown = set(section) - known
        if unknown:
            raise ValueError(f"Unknown tensorutils settings: {sorted(unknown)}")
        return cls(**section)


_config = TensorUtilsConfig()


def get_config() -> TensorUtilsConfig:
    """Return the process-wide configuration."""
    return _config


def set_config(config: TensorUtilsConfig) -> TensorUtilsConfig:
    """Install ``config`` as the process-wide configuration.

    Returns:
        The previous configuration, so callers can restore it.
    """
    global _config
    previous = _config
    _config = config
    return previous

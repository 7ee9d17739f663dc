"""Settings for the Tray interpreter and its interactive loop."""

from dataclasses import dataclass
import json
import logging
import os


DEFAULT_SETTINGS_PATH = os.path.expanduser("~/.tray/settings.json")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class TraySettings:
    """
    User settings for Tray.
    """
    prompt: str = "tray> "
    show_tokens: bool = False
    show_tree: bool = True
    color: bool = True
    parser_max_depth: int = 200
    evaluator_max_depth: int = 1000
    log_level: str = "WARNING"

    @classmethod
    def create_default(cls) -> "TraySettings":
        """Create a new TraySettings object with default values."""
        return cls()

    @classmethod
    def load(cls, path: str) -> "TraySettings":
        """
        Load settings from file.

        Keys missing from the file keep their default values and unknown keys
        are ignored.

        Args:
            path: Path to the settings file

        Returns:
            TraySettings object with loaded values

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not valid JSON (json.JSONDecodeError), is
                not a JSON object, or holds a depth limit that is not an integer
        """
        settings = cls.create_default()

        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

            if not isinstance(data, dict):
                raise ValueError(f"Settings file must hold a JSON object, found {type(data).__name__}")

            settings.prompt = str(data.get("prompt", settings.prompt))
            settings.show_tokens = bool(data.get("showTokens", settings.show_tokens))
            settings.show_tree = bool(data.get("showTree", settings.show_tree))
            settings.color = bool(data.get("color", settings.color))

            try:
                settings.parser_max_depth = int(data.get("parserMaxDepth", settings.parser_max_depth))
                settings.evaluator_max_depth = int(data.get("evaluatorMaxDepth", settings.evaluator_max_depth))

            except TypeError as e:
                raise ValueError(f"Depth limits must be integers: {e}") from e

            log_level = str(data.get("logLevel", settings.log_level)).upper()
            if log_level in LOG_LEVELS:
                settings.log_level = log_level

            else:
                logging.getLogger("TraySettings").warning(
                    "Ignoring unknown log level %r in %s", log_level, path
                )

        return settings

    @classmethod
    def load_or_default(cls, path: str = DEFAULT_SETTINGS_PATH) -> "TraySettings":
        """
        Load settings from file if it exists, otherwise use the defaults.

        Args:
            path: Path to the settings file

        Returns:
            TraySettings object
        """
        if not os.path.exists(path):
            return cls.create_default()

        return cls.load(path)

    def save(self, path: str) -> None:
        """
        Save settings to file.

        Args:
            path: Path to save the settings file

        Raises:
            OSError: If there's an error writing the file
        """
        data = {
            "prompt": self.prompt,
            "showTokens": self.show_tokens,
            "showTree": self.show_tree,
            "color": self.color,
            "parserMaxDepth": self.parser_max_depth,
            "evaluatorMaxDepth": self.evaluator_max_depth,
            "logLevel": self.log_level
        }

        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=4)

"""Analysis configuration loader.

Loads and provides access to centralized analysis parameters from config.yaml.
Ensures reproducibility by centralizing all tunable parameters.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import yaml

__all__ = ["AnalysisConfig", "config"]


class AnalysisConfig:
    """Analysis configuration singleton."""

    _instance: AnalysisConfig | None = None
    _config: dict[str, Any] | None = None

    def __new__(cls) -> AnalysisConfig:
        """Singleton pattern to ensure config is loaded once."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Load configuration from YAML file."""
        if self._config is None:
            config_path = Path(__file__).parent / "config.yaml"
            with open(config_path, encoding="utf-8") as f:
                self._config = yaml.safe_load(f)

    def get(self, *keys: str, default: Any = None) -> Any:
        """Get configuration value by nested keys.

        Args:
            *keys: Nested keys to traverse (e.g., "tables", "na_rep")
            default: Default value if key path not found

        Returns:
            Configuration value or default

        Examples:
            >>> config = AnalysisConfig()
            >>> config.get("grouping", "separator")
            '_'
            >>> config.get("tables", "precision", "mean_sd")
            1

        """
        value = self._config
        for key in keys:
            if not isinstance(value, dict) or key not in value:
                return default
            value = value[key]
        return value

    @property
    def column_mapping(self) -> dict[str, str]:
        """Source header to canonical column name mapping."""
        return cast(dict[str, str], self.get("columns", default={}))

    @property
    def loader_sep(self) -> str:
        """Field delimiter of the input file."""
        return cast(str, self.get("loader", "sep", default=","))

    @property
    def group_keys(self) -> list[str]:
        """Categorical columns used to partition records."""
        return cast(list[str], self.get("grouping", "keys", default=["sex", "incl"]))

    @property
    def group_separator(self) -> str:
        """Separator joining group values into a wide column key."""
        return cast(str, self.get("grouping", "separator", default="_"))

    @property
    def variable_order(self) -> list[str]:
        """Summarized variables, in presentation order."""
        return cast(
            list[str], self.get("variables", "order", default=["age", "height", "weight", "LBM"])
        )

    @property
    def precision_mean_sd(self) -> int:
        """Number of decimal places for mean (sd) cells."""
        return cast(int, self.get("tables", "precision", "mean_sd", default=1))

    @property
    def na_rep(self) -> str:
        """Display marker for non-finite statistics."""
        return cast(str, self.get("tables", "na_rep", default="NA"))

    @property
    def table_labels(self) -> dict[str, Any]:
        """Default column labels, header groups, footnote and caption."""
        return cast(dict[str, Any], self.get("tables", "labels", default={}))

    @property
    def pipeline_version(self) -> str:
        """Analysis pipeline version."""
        return cast(str, self.get("reproducibility", "pipeline_version", default="1.0.0"))

    @property
    def config_version(self) -> str:
        """Configuration file version."""
        return cast(str, self.get("reproducibility", "config_version", default="1.0.0"))


# Global singleton instance
config = AnalysisConfig()

"""Unit tests for analysis configuration."""

from bodycomp.analysis.config import AnalysisConfig, config


def test_config_singleton():
    """Test config is a singleton."""
    config1 = AnalysisConfig()
    config2 = AnalysisConfig()
    assert config1 is config2


def test_config_get_nested():
    """Test nested key access."""
    assert config.get("grouping", "separator") == "_"
    assert config.get("tables", "precision", "mean_sd") == 1
    assert config.get("nonexistent", "key", default="default") == "default"


def test_config_grouping():
    """Test grouping keys and variable order."""
    assert config.group_keys == ["sex", "incl"]
    assert config.variable_order == ["age", "height", "weight", "LBM"]


def test_config_formatting():
    """Test precision and non-finite marker."""
    assert config.precision_mean_sd == 1
    assert config.na_rep == "NA"


def test_config_column_mapping():
    """Test source headers map onto the canonical names."""
    mapping = config.column_mapping
    assert mapping["ID"] == "id"
    assert mapping["BMD"] == "bmd"
    assert set(mapping.values()) >= {"id", "fat", "bmd", "lean", "sex", "incl"}


def test_config_table_labels_consistent():
    """Test default header group spans cover every default column label."""
    labels = config.table_labels
    spans = sum(group["span"] for group in labels["header_groups"])
    assert spans == len(labels["column_labels"])
    assert set(labels["row_labels"]) == set(config.variable_order)


def test_config_versions():
    """Test version metadata."""
    assert config.pipeline_version == "1.0.0"
    assert config.config_version == "1.0.0"

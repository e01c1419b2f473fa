"""
Config loading for synthetic panel generation.

Configurations are declared as dataclasses and merged from YAML files
using OmegaConf structured configs, so unknown keys and wrong types are
rejected before the dataclass validation runs.
"""

from pathlib import Path

from omegaconf import OmegaConf

from panel_analysis.synthetic_data.config import PanelGenerationConfig


def load_config(
    yaml_path: Path | None,
    overrides: dict[str, object] | None = None,
) -> PanelGenerationConfig:
    """Load and validate generation parameters from YAML.

    Args:
        yaml_path: Path to YAML config file. None uses the defaults.
        overrides: Optional key/value pairs applied after the file.

    Returns:
        Validated PanelGenerationConfig

    Raises:
        InvalidParameter: If parameters are out of range
        FileNotFoundError: If yaml_path doesn't exist
    """
    # Create schema from dataclass
    schema = OmegaConf.structured(PanelGenerationConfig)

    if yaml_path is not None:
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        user_config = OmegaConf.load(yaml_path)
        config = OmegaConf.merge(schema, user_config)
    else:
        config = schema

    if overrides:
        config = OmegaConf.merge(config, OmegaConf.create(overrides))

    # Convert to typed dataclass
    result = OmegaConf.to_object(config)
    assert isinstance(result, PanelGenerationConfig)

    return result

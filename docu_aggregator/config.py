"""Aggregator configuration.

Configuration is passed explicitly to the aggregator and the importer;
nothing is looked up globally.
"""

import json
import os
from dataclasses import dataclass, field

from docu_aggregator.resolution.page_name_sanitizer import PageNameSanitizer, sanitize_page_name

DATA_DIR_ENV_VAR = 'DOCU_AGGREGATOR_DATA_DIR'


class ConfigError(Exception):
    """Invalid configuration file."""
    pass


@dataclass(frozen=True)
class CustomObjectTab:
    """A configured grouping of referenced objects of selected types."""

    tab_id: str
    title: str
    searched_object_types: tuple[str, ...]


@dataclass
class AggregatorConfig:
    """Options controlling aggregation and the derived output."""

    documentation_data_directory: str
    custom_object_tabs: list[CustomObjectTab] = field(default_factory=list)
    pretty: bool = True
    page_name_sanitizer: PageNameSanitizer = sanitize_page_name


def load_config(documentation_data_directory: str, config_path: str | None = None) -> AggregatorConfig:
    """
    Build the configuration, optionally reading a JSON config file.

    The file may contain ``pretty`` and ``custom_object_tabs``, e.g.::

        {
          "pretty": false,
          "custom_object_tabs": [
            {"id": "pages", "title": "Pages", "searched_object_types": ["page"]}
          ]
        }

    Raises:
        ConfigError: If the file cannot be read or has an invalid structure.
    """
    config = AggregatorConfig(documentation_data_directory=documentation_data_directory)
    if not config_path:
        return config

    try:
        with open(config_path, encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")

    config.pretty = bool(data.get('pretty', True))
    config.custom_object_tabs = [_parse_tab(tab, config_path) for tab in data.get('custom_object_tabs', [])]

    tab_ids = [tab.tab_id for tab in config.custom_object_tabs]
    if len(tab_ids) != len(set(tab_ids)):
        raise ConfigError(f"Duplicate custom object tab ids in {config_path}")
    return config


def default_data_directory() -> str:
    """Data directory from the environment, falling back to the working directory."""
    return os.environ.get(DATA_DIR_ENV_VAR, os.getcwd())


def _parse_tab(tab: dict, config_path: str) -> CustomObjectTab:
    try:
        types = tab['searched_object_types']
        if isinstance(types, str):
            types = [types]
        return CustomObjectTab(
            tab_id=str(tab['id']),
            title=str(tab.get('title', tab['id'])),
            searched_object_types=tuple(str(t) for t in types),
        )
    except (KeyError, TypeError) as e:
        raise ConfigError(f"Invalid custom object tab {tab!r} in {config_path}") from e

"""Entry points used by the presentation layer."""

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

from .config import AppConfig, get_config
from .exceptions import SettingsNotFoundError
from .models import SortResult
from .settings import SettingsStore, default_settings
from .sorter import SortEngine


logger = logging.getLogger(__name__)


def _store(store: Optional[SettingsStore], config: Optional[AppConfig]) -> SettingsStore:
    if store is not None:
        return store
    app_config = config or get_config()
    return SettingsStore(app_config.paths.settings_file)


def load_settings(store: Optional[SettingsStore] = None,
                  config: Optional[AppConfig] = None) -> Dict[str, str]:
    """
    Return the persisted category -> destination mapping.

    Raises:
        SettingsError: NOT_FOUND, CORRUPT or IO_FAILURE
    """
    return _store(store, config).load()


def save_settings(settings: Mapping[str, str], store: Optional[SettingsStore] = None,
                  config: Optional[AppConfig] = None) -> None:
    """
    Persist ``settings``, replacing the previous document.

    Raises:
        SettingsIOError: The document could not be written
        ValidationError: The mapping names unknown categories or empty paths
    """
    _store(store, config).save(settings)


def load_or_create_settings(store: Optional[SettingsStore] = None,
                            config: Optional[AppConfig] = None) -> Dict[str, str]:
    """
    Load the settings, writing the defaults first when none exist.

    A corrupt document is reported, never replaced.
    """
    app_config = config or get_config()
    settings_store = _store(store, app_config)
    try:
        return settings_store.load()
    except SettingsNotFoundError:
        settings = default_settings(app_config.paths.sorted_root)
        logger.info(f"No settings at {settings_store.path}, creating defaults")
        settings_store.save(settings)
        return settings


def create_engine(store: SettingsStore, config: AppConfig, progress_callback=None) -> SortEngine:
    """Build a SortEngine that never touches the application's own files."""
    excluded = [store.path]
    if config.config_file is not None:
        excluded.append(config.config_file)
    return SortEngine(
        include_hidden=config.sort.include_hidden,
        excluded_paths=excluded,
        exclude_filter=store.is_internal_file,
        max_disambiguation_attempts=config.sort.max_disambiguation_attempts,
        progress_callback=progress_callback,
    )


def scan_and_sort(source_dir: Optional[Path] = None, store: Optional[SettingsStore] = None,
                  config: Optional[AppConfig] = None, progress_callback=None) -> SortResult:
    """
    Sort the source directory using the persisted settings.

    Args:
        source_dir: Directory to sort, defaults to the configured source or the desktop
        store: Settings store, defaults to the configured location
        config: Application configuration, defaults to the global one
        progress_callback: Optional (processed, total) callback

    Raises:
        SettingsError: The settings could not be loaded
        ScanError: The source directory could not be listed
    """
    app_config = config or get_config()
    settings_store = _store(store, app_config)
    settings = settings_store.load()

    if source_dir is None:
        source_dir = app_config.paths.resolve_source_dir()

    engine = create_engine(settings_store, app_config, progress_callback)
    return engine.scan_and_sort(Path(source_dir), settings)

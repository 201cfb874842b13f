# barsmith/config/loader.py
"""
Handles loading, merging, and saving of configurations from/to TOML files.
"""
import toml
from pathlib import Path
from typing import Dict, Any, Optional
import structlog

from barsmith.exceptions import ConfigError

from .settings import RenderConfig

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".barsmith.toml", "barsmith.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "barsmith"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

CONFIG_KEY_TO_RENDERCONFIG_ATTR_MAP: Dict[str, str] = {
    "template": "template_path",
    "context": "context_paths",
    "output": "output_file",
    "vars": "user_vars",
    "markdown_extensions": "markdown_extensions",
    "partials": "partials_enabled",
}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file(): return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
        return data.get("tool", {}).get("barsmith", {}) if file_path.name == "pyproject.toml" else data
    except (OSError, toml.TomlDecodeError) as e:
        log.error("config_file_load_error", path=str(file_path), error=str(e))
        return {}

def load_and_merge_configs(cwd: Optional[Path] = None) -> Dict[str, Any]:
    # user-level config first, then the first project config found in cwd.
    # profiles merge by name; every other key is replaced by the project value.
    cwd = cwd or Path.cwd()
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged_toml_data.update(_load_toml_file_data(USER_CONFIG_FILE))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = cwd / filename
        if candidate.is_file():
            project_settings = _load_toml_file_data(candidate)
            if project_settings:
                log.info("loading_project_local_config", path=str(candidate))
                project_profiles = project_settings.pop("profiles", None)
                merged_toml_data.update(project_settings)
                if isinstance(project_profiles, dict) and project_profiles:
                    user_profiles = merged_toml_data.get("profiles")
                    profiles = dict(user_profiles) if isinstance(user_profiles, dict) else {}
                    profiles.update(project_profiles)
                    merged_toml_data["profiles"] = profiles
                break
    if not merged_toml_data: log.debug("no_configuration_files_loaded")
    return merged_toml_data

def options_from_config_data(config_data: Dict[str, Any]) -> Dict[str, Any]:
    # maps recognized TOML keys onto RenderConfig attribute names.
    return {
        attr: config_data[toml_key]
        for toml_key, attr in CONFIG_KEY_TO_RENDERCONFIG_ATTR_MAP.items()
        if toml_key in config_data
    }

def profile_data_from_config(config: RenderConfig) -> Dict[str, Any]:
    """TOML-ready values for every option that differs from its default."""
    profile_data: Dict[str, Any] = {}
    if config.template_path: profile_data["template"] = str(config.template_path)
    if config.context_paths: profile_data["context"] = [str(p) for p in config.context_paths]
    if config.output_file: profile_data["output"] = str(config.output_file)
    if config.user_vars: profile_data["vars"] = dict(config.user_vars)
    if config.markdown_extensions: profile_data["markdown_extensions"] = list(config.markdown_extensions)
    if not config.partials_enabled: profile_data["partials"] = False
    return profile_data

def _profile_target_path(cwd: Path) -> Path:
    # an existing barsmith.toml is reused; otherwise .barsmith.toml.
    dot_file, plain_file = cwd / ".barsmith.toml", cwd / "barsmith.toml"
    return plain_file if plain_file.is_file() and not dot_file.exists() else dot_file

def save_config_to_profile(config_to_save: RenderConfig, profile_name: str, cwd: Optional[Path] = None) -> bool:
    """
    Saves the options in `config_to_save` as [profiles.<profile_name>] in the
    project's config file. The name "default" writes them as top-level keys
    instead. Returns False when there is nothing to save.
    """
    target_toml_path = _profile_target_path(cwd or Path.cwd())
    profile_data = profile_data_from_config(config_to_save)
    if not profile_data:
        log.info("no_options_to_save_for_profile", profile=profile_name)
        return False

    try:
        document = toml.load(target_toml_path) if target_toml_path.exists() else {}
    except (OSError, toml.TomlDecodeError) as e:
        raise ConfigError(f"Could not read existing TOML {target_toml_path} to save profile: {e}") from e

    if profile_name.upper() == "DEFAULT":
        for toml_key in CONFIG_KEY_TO_RENDERCONFIG_ATTR_MAP:
            document.pop(toml_key, None)
        document.update(profile_data)
    else:
        document.setdefault("profiles", {})[profile_name] = profile_data

    try:
        target_toml_path.write_text(toml.dumps(document), encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Error writing profile '{profile_name}' to {target_toml_path}: {e}") from e
    log.info("profile_saved", profile=profile_name, path=str(target_toml_path), keys=sorted(profile_data))
    return True

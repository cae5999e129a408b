"""Configuration loading for time tracking tickets."""

import os

from dotenv import load_dotenv

from patterns import Patterns

ENV_FILE = ".env"

# Environment variable -> (section, key)
REQUIRED_VARS = {
    "JIRA_DOMAIN": ("jira", "domain"),
    "JIRA_USERNAME": ("jira", "username"),
    "JIRA_API_TOKEN": ("jira", "api_token"),
    "JIRA_PROJECT_KEY": ("tracking", "project_key"),
    "JIRA_ASSIGNEE": ("tracking", "assignee"),
    "TIME_TRACKING_IDENTITY": ("tracking", "identity"),
}

OPTIONAL_VARS = {
    "JIRA_API_VERSION": ("jira", "api_version", "3"),
    "JIRA_SEARCH_PATH": ("jira", "search_path", "/search"),
    "JIRA_DONE_TRANSITION": ("tracking", "done_transition", "Done"),
}


class ConfigurationError(Exception):
    """Missing or invalid configuration, raised before any Jira request."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


def normalize_domain(domain: str) -> str:
    """Strip scheme and trailing slash: https://acme.atlassian.net/ -> acme.atlassian.net"""
    domain = domain.strip()
    for scheme in ("https://", "http://"):
        if domain.startswith(scheme):
            domain = domain[len(scheme):]
    return domain.rstrip("/")


def config_from_env(environ=None) -> dict:
    """Build the config dict from environment variables (no validation)."""
    environ = os.environ if environ is None else environ
    config: dict = {"jira": {}, "tracking": {}}

    for var, (section, key) in REQUIRED_VARS.items():
        config[section][key] = (environ.get(var) or "").strip()

    for var, (section, key, default) in OPTIONAL_VARS.items():
        config[section][key] = (environ.get(var) or "").strip() or default

    if config["jira"]["domain"]:
        config["jira"]["domain"] = normalize_domain(config["jira"]["domain"])
    if not config["jira"]["search_path"].startswith("/"):
        config["jira"]["search_path"] = "/" + config["jira"]["search_path"]
    return config


def validate_config(config: dict) -> list[str]:
    """Validate config structure and return list of error messages.

    Returns:
        Empty list if valid, otherwise list of error messages.
    """
    errors = []

    for var, (section, key) in REQUIRED_VARS.items():
        if not config.get(section, {}).get(key):
            errors.append(f"Missing {var}")

    project_key = config.get("tracking", {}).get("project_key", "")
    if project_key and not Patterns.PROJECT_KEY.match(project_key):
        errors.append(f"Invalid JIRA_PROJECT_KEY '{project_key}'")

    api_version = config.get("jira", {}).get("api_version", "")
    if api_version and not api_version.isdigit():
        errors.append(f"Invalid JIRA_API_VERSION '{api_version}', expected a number")

    return errors


def load_config(env_file: str | None = ENV_FILE) -> dict:
    """Load config from the environment, reading .env first if present.

    Raises:
        ConfigurationError: listing every missing or invalid value.
    """
    if env_file and os.path.exists(env_file):
        # Real environment variables win over .env
        load_dotenv(env_file, override=False)

    config = config_from_env()
    errors = validate_config(config)
    if errors:
        raise ConfigurationError(errors)
    return config


def load_config_safe(env_file: str | None = ENV_FILE) -> dict | None:
    """Load config with user-friendly error messages.

    Returns:
        Config dict if valid, None if errors occurred.
    """
    try:
        return load_config(env_file)
    except ConfigurationError as e:
        print("[!] ERROR: configuration is incomplete:")
        for err in e.errors:
            print(f"    - {err}")
        print()
        print("    Set the variables in your environment or in .env")
        print("    (see .env.example for the required names).")
        return None


def validate_limit(limit: int | None) -> None:
    """A ticket limit must be a positive integer when given.

    Raises:
        ConfigurationError: for zero or negative limits.
    """
    if limit is not None and limit <= 0:
        raise ConfigurationError([f"--limit must be a positive number, got {limit}"])

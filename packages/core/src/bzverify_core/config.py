import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "bugzilla_url": "https://bugzilla.redhat.com",
    "approval_label": "qe-approved",
    # Accounts the bot comments as; both the login and the e-mail form show up as comment creators.
    "robot_accounts": ["openshift-bugzilla-robot", "openshift-bugzilla-robot@redhat.com"],
    "unset_target_release": "---",
    "github_url": "https://github.com/",  # external tracker URL identifying GitHub pull links
    "private_comments": True,
    "request_timeout": 30,
}

_LIST_KEYS = ("robot_accounts",)


def load_config(config_path: str = ".bzverify.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .bzverify.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG}
    for key in _LIST_KEYS:
        config[key] = list(DEFAULT_CONFIG[key])

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["bugzilla_api_key"] = os.environ.get("BUGZILLA_API_KEY")
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config

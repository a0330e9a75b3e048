"""Prompt template loader.

Loads YAML prompt templates from config/prompts/ and renders them with
str.format-style placeholders.
"""
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from careerpath.core.exceptions import ConfigurationError


class PromptLoader:
    """Load prompt templates from YAML files."""

    def __init__(self, prompts_dir: Optional[Path] = None):
        """Initialize loader.

        Args:
            prompts_dir: Path to prompts directory.
                         Defaults to careerpath/config/prompts/
        """
        if prompts_dir is None:
            prompts_dir = Path(__file__).parent.parent.parent / "config" / "prompts"
        self._prompts_dir = Path(prompts_dir)
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load(self, name: str) -> Dict[str, Any]:
        """Load a prompt template by name.

        Args:
            name: Template name (e.g., "industry_insights")

        Returns:
            Dictionary with the template configuration

        Raises:
            ConfigurationError: If the template file is missing or malformed
        """
        if name in self._cache:
            return self._cache[name]

        # Try insights/ subdirectory first, then the root prompts directory
        path = self._prompts_dir / "insights" / f"{name}.yaml"
        if not path.exists():
            path = self._prompts_dir / f"{name}.yaml"
        if not path.exists():
            raise ConfigurationError(f"Prompt template not found: {name}")

        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict) or "template" not in config:
            raise ConfigurationError(f"Prompt template {name} has no 'template' key")

        self._cache[name] = config
        return config

    def render(self, name: str, **values: Any) -> str:
        """Render a template with the given placeholder values.

        Optional sections listed under 'optional' are rendered only when
        their controlling value is truthy, and blank otherwise.
        """
        config = self.load(name)
        optional = config.get("optional") or {}

        rendered_sections = {}
        for section, spec in optional.items():
            enabled = bool(values.get(spec.get("when", section)))
            rendered_sections[section] = spec["text"].format(**values) if enabled else ""

        try:
            return config["template"].format(**values, **rendered_sections).strip()
        except KeyError as e:
            raise ConfigurationError(f"Prompt template {name} needs value {e}") from e

    def system_prompt(self, name: str) -> Optional[str]:
        return self.load(name).get("system_prompt")

    def clear_cache(self) -> None:
        """Clear the template cache."""
        self._cache.clear()

"""System prompt for the simulated controller.

The prompt has three parts: a persona naming the airport, a phraseology
directive, and the current METAR. The first two can be overridden from a
YAML file with ``persona`` and ``phraseology`` keys; ``{code}`` in either is
replaced with the airport's ICAO code.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from airwaves.core.logging_system import get_logger

logger = get_logger(__name__)

DEFAULT_PERSONA = "You are a real air traffic controller at {code}."
DEFAULT_PHRASEOLOGY = "Use real aviation phraseology. Keep replies short and realistic."
WEATHER_LINE = "Current weather (METAR): {weather}"


@dataclass(frozen=True)
class PromptTemplate:
    """Controller system prompt template.

    Attributes:
        persona: Role instruction, may contain ``{code}``.
        phraseology: Style directive, may contain ``{code}``.
    """

    persona: str = DEFAULT_PERSONA
    phraseology: str = DEFAULT_PHRASEOLOGY

    def render(self, code: str, weather: str) -> str:
        """Build the system prompt for an airport.

        Args:
            code: Airport ICAO code.
            weather: Current METAR text or placeholder.

        Returns:
            Prompt text.
        """
        return "\n".join(
            [
                self.persona.replace("{code}", code),
                self.phraseology.replace("{code}", code),
                WEATHER_LINE.format(weather=weather),
            ]
        )


def load_prompt_template(path: Path | str | None) -> PromptTemplate:
    """Load a prompt template from YAML, falling back to defaults.

    Args:
        path: YAML file path, or None/"" for the defaults.

    Returns:
        PromptTemplate with any overridden parts applied.
    """
    if not path:
        return PromptTemplate()

    path = Path(path)
    if not path.exists():
        logger.warning("Persona file not found at %s, using defaults", path)
        return PromptTemplate()

    try:
        with open(path, encoding="utf-8") as f:
            config: dict[str, Any] = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Error loading persona file %s: %s", path, e)
        return PromptTemplate()

    if not isinstance(config, dict):
        logger.warning("Persona file %s is not a mapping, using defaults", path)
        return PromptTemplate()

    template = PromptTemplate(
        persona=str(config.get("persona") or DEFAULT_PERSONA).strip(),
        phraseology=str(config.get("phraseology") or DEFAULT_PHRASEOLOGY).strip(),
    )
    logger.info("Loaded controller persona from %s", path)
    return template

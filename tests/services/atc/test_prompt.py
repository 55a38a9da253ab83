"""Tests for the controller prompt template."""

from pathlib import Path

from airwaves.services.atc.prompt import (
    DEFAULT_PERSONA,
    DEFAULT_PHRASEOLOGY,
    PromptTemplate,
    load_prompt_template,
)


class TestPromptTemplate:
    """Tests for PromptTemplate and its YAML loader."""

    def test_render_default(self) -> None:
        """Test the default prompt has persona, directive and weather."""
        text = PromptTemplate().render("EGLL", "EGLL 181250Z 24012KT CAVOK 14/08 Q1018")
        lines = text.split("\n")
        assert lines[0] == "You are a real air traffic controller at EGLL."
        assert lines[1] == DEFAULT_PHRASEOLOGY
        assert lines[2] == "Current weather (METAR): EGLL 181250Z 24012KT CAVOK 14/08 Q1018"

    def test_render_keeps_braces_in_weather(self) -> None:
        """Test weather text is inserted literally."""
        text = PromptTemplate().render("KJFK", "odd {text}")
        assert text.endswith("odd {text}")

    def test_load_none_returns_defaults(self) -> None:
        assert load_prompt_template(None) == PromptTemplate()
        assert load_prompt_template("") == PromptTemplate()

    def test_load_missing_file(self, tmp_path: Path) -> None:
        assert load_prompt_template(tmp_path / "missing.yaml") == PromptTemplate()

    def test_load_override(self, tmp_path: Path) -> None:
        """Test persona and phraseology come from YAML."""
        path = tmp_path / "persona.yaml"
        path.write_text(
            'persona: "You are {code} Tower."\nphraseology: "Use ICAO phraseology."\n',
            encoding="utf-8",
        )
        template = load_prompt_template(path)
        assert template.persona == "You are {code} Tower."
        assert template.render("LFPG", "x").startswith("You are LFPG Tower.\nUse ICAO phraseology.")

    def test_load_partial_override(self, tmp_path: Path) -> None:
        """Test missing keys keep their defaults."""
        path = tmp_path / "persona.yaml"
        path.write_text('phraseology: "Be brief."\n', encoding="utf-8")
        template = load_prompt_template(path)
        assert template.persona == DEFAULT_PERSONA
        assert template.phraseology == "Be brief."

    def test_load_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "persona.yaml"
        path.write_text("persona: [unclosed\n", encoding="utf-8")
        assert load_prompt_template(path) == PromptTemplate()

    def test_shipped_persona_matches_defaults(self) -> None:
        """Test the bundled YAML reproduces the default prompt."""
        path = Path(__file__).parents[3] / "config" / "atc_persona.yaml"
        assert load_prompt_template(path) == PromptTemplate()

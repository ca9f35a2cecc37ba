from pydantic import BaseModel, Field
from typing import Any, Literal


class FlowchartConfig(BaseModel):
    html_labels: bool = True
    curve: Literal["linear", "basis", "cardinal", "step"] = "linear"
    use_max_width: bool = False


class EngineConfig(BaseModel):
    provider: Literal["mmdc", "kroki"] = "mmdc"
    mmdc_path: str = "mmdc"
    kroki_url: str = "https://kroki.io"
    timeout: float = Field(default=30.0, gt=0)
    theme: Literal["default", "neutral", "dark", "forest", "base"] = "default"
    security_level: Literal["strict", "loose", "antiscript", "sandbox"] = "loose"
    font_family: str = "sans-serif"
    log_level: int = Field(default=5, ge=0, le=5)
    error_label_color: str = "#ff5722"
    deterministic_ids: bool = True
    flowchart: FlowchartConfig = Field(default_factory=FlowchartConfig)

    def mermaid_config(self) -> dict[str, Any]:
        """Engine settings in the camelCase shape mermaid's initialize() expects."""
        return {
            "startOnLoad": False,
            "theme": self.theme,
            "securityLevel": self.security_level,
            "fontFamily": self.font_family,
            "logLevel": self.log_level,
            "errorLabelColor": self.error_label_color,
            "deterministicIds": self.deterministic_ids,
            "flowchart": {
                "htmlLabels": self.flowchart.html_labels,
                "curve": self.flowchart.curve,
                "useMaxWidth": self.flowchart.use_max_width,
            },
        }


class RenderSettings(BaseModel):
    prime_engine: bool = True
    topic_keywords: list[str] = Field(default_factory=lambda: ["Water"])
    syntax_error_marker: str = "Syntax error"
    undefined_reference_marker: str = "Undefined"
    scratch: Literal["memory", "filesystem"] = "memory"
    scratch_dir: str | None = None


class ExportConfig(BaseModel):
    output_dir: str = "."


class WatchConfig(BaseModel):
    debounce_seconds: float = Field(default=0.5, ge=0)


class MermendConfig(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    render: RenderSettings = Field(default_factory=RenderSettings)
    export: ExportConfig = Field(default_factory=ExportConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"

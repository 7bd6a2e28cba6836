"""Pydantic models for mecenas.yaml configuration."""

from typing import Literal

from pydantic import BaseModel, Field

PrivacyModeName = Literal["auto", "strict", "off"]


class PrivacyConfig(BaseModel):
    """Privacy routing policy."""

    mode: PrivacyModeName = Field(
        default="auto",
        description="Global privacy mode: auto (protect on PII), strict (always local), off",
    )
    block_cloud_on_pii: bool = Field(
        default=True,
        description="Refuse instead of falling back to cloud when PII is present and Ollama is down",
    )
    anonymize_for_cloud: bool = Field(
        default=True,
        description="Replace detected personal data with placeholders before cloud calls",
    )
    strip_active_case_for_cloud: bool = Field(
        default=True,
        description="Send only the base system prompt (no active case context) to the cloud",
    )


class OllamaConfig(BaseModel):
    """Local Ollama server configuration."""

    host: str = Field(default="http://localhost:11434", description="Ollama server URL")
    timeout: int = Field(default=120, description="Model turn timeout in seconds", ge=1)
    probe_timeout: float = Field(default=3.0, description="Reachability probe timeout", gt=0)
    model_probe_timeout: float = Field(default=5.0, description="Model presence probe timeout", gt=0)
    model_recheck_seconds: float = Field(
        default=300.0,
        description="How long a model presence result is cached",
        ge=0,
    )


class CloudConfig(BaseModel):
    """Anthropic cloud provider configuration."""

    model: str = Field(default="claude-sonnet-4-5-20250929", description="Anthropic model name")
    api_key_env: str = Field(
        default="ANTHROPIC_API_KEY",
        description="Environment variable holding the Anthropic API key",
    )
    timeout: int = Field(default=120, description="Request timeout in seconds", ge=1)


class AgentConfig(BaseModel):
    """Agent loop configuration."""

    provider: Literal["ollama", "anthropic"] = Field(
        default="ollama",
        description="Primary provider for non-sensitive messages",
    )
    model: str = Field(
        default="SpeakLeash/bielik-11b-v2.2-instruct:Q4_K_M",
        description="Main local model",
    )
    speed_model: str | None = Field(
        default="gemma3:4b",
        description="Smaller local model for simple queries (None disables routing)",
    )
    max_tokens: int = Field(default=4096, description="Maximum tokens per response", ge=256, le=65536)
    temperature: float = Field(default=0.3, description="Sampling temperature", ge=0.0, le=2.0)
    max_tool_turns: int = Field(default=10, description="Maximum tool rounds per message", ge=1, le=50)
    history_window: int = Field(default=20, description="Conversation turns sent to the model", ge=1)


class RemindersConfig(BaseModel):
    """Deadline reminder scheduler configuration."""

    enabled: bool = Field(default=True, description="Run the deadline reminder scheduler")
    interval_seconds: float = Field(default=300.0, description="Scan interval", gt=0)
    capacity: int = Field(default=5000, description="Maximum remembered reminders", ge=1)


class AuditConfig(BaseModel):
    """Privacy audit trail configuration."""

    enabled: bool = Field(default=True, description="Persist privacy audit events to SQLite")
    database_path: str = Field(
        default="~/.mecenas/privacy_audit.db",
        description="Path to the privacy audit database",
    )


class SaosConfig(BaseModel):
    """SAOS court decisions API configuration."""

    base_url: str = Field(default="https://www.saos.org.pl", description="SAOS API base URL")
    timeout: float = Field(default=15.0, description="Request timeout in seconds", gt=0)


class MecenasConfig(BaseModel):
    """Root configuration model for mecenas.yaml."""

    privacy: PrivacyConfig = Field(default_factory=PrivacyConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    cloud: CloudConfig = Field(default_factory=CloudConfig)
    reminders: RemindersConfig = Field(default_factory=RemindersConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    saos: SaosConfig = Field(default_factory=SaosConfig)

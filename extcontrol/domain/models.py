from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


ADVANCED_PARAM_KEY = "showadvancedparam"
ADVANCED_PARAM_DEFAULT = False
MAX_LOST_PACKAGES_KEY = "maxlostpackages"
MAX_LOST_PACKAGES_DEFAULT = "1000"
GAIN_SERVO_J_KEY = "gain_servo_j"
GAIN_SERVO_J_DEFAULT = "0"
MASTER_KEY = "MASTER"
MASTER_NAME_KEY = "MASTER_NAME"
PORT_KEY = "PORT"
DEFAULT_MASTER = ""
DEFAULT_MASTER_NAME = ""
DEFAULT_PORT = ""


class EndpointDescriptor(BaseModel):
    """Remote master this node connects to."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    address: str = ""
    port: str = ""

    def same_target(self, other: "EndpointDescriptor") -> bool:
        # Name is deliberately left out: only address and port identify a target.
        return self.address == other.address and self.port == other.port

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.address or self.port)


class NodeParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    show_advanced_params: bool = ADVANCED_PARAM_DEFAULT
    max_lost_packages: str = MAX_LOST_PACKAGES_DEFAULT
    gain_servo_j: str = GAIN_SERVO_J_DEFAULT
    master: EndpointDescriptor = Field(default_factory=EndpointDescriptor)


class InstallationSettings(BaseModel):
    name: str = "External Control"
    host_ip: str = Field(min_length=1)
    custom_port: int = Field(default=50002, ge=1, le=65535)

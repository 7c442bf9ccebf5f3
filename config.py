"""
config.py - Planning coefficients for fat-tree estimates.

Link capacity and the per-unit switch price and power figures used by the
metrics and cost estimators. Values are illustrative planning numbers.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Union
import json

from models import ConfigError


DEFAULT_LINK_CAPACITY_GBPS = 10.0


def _require_number(owner: str, name: str, value, positive: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{owner}.{name} must be a number, got {value!r}")
    if positive and value <= 0:
        raise ConfigError(f"{owner}.{name} must be positive, got {value}")
    if value < 0:
        raise ConfigError(f"{owner}.{name} must not be negative, got {value}")


@dataclass
class SwitchPricing:
    core_switch_price: float = 50_000.0
    aggregation_switch_price: float = 30_000.0
    edge_switch_price: float = 20_000.0
    link_cost_per_gbps: float = 100.0

    def __post_init__(self):
        for name in ("core_switch_price", "aggregation_switch_price",
                     "edge_switch_price", "link_cost_per_gbps"):
            _require_number("pricing", name, getattr(self, name))

    def switch_cost(self, core: int, aggregation: int, edge: int) -> float:
        return (
            core * self.core_switch_price
            + aggregation * self.aggregation_switch_price
            + edge * self.edge_switch_price
        )

    def __str__(self) -> str:
        return (
            f"Switch Pricing:\n"
            f"  Core: ${self.core_switch_price:,.0f}\n"
            f"  Aggregation: ${self.aggregation_switch_price:,.0f}\n"
            f"  Edge: ${self.edge_switch_price:,.0f}\n"
            f"  Link cost/Gbps: ${self.link_cost_per_gbps:,.0f}"
        )


@dataclass
class SwitchPower:
    core_switch_kw: float = 5.0
    aggregation_switch_kw: float = 3.0
    edge_switch_kw: float = 2.0

    def __post_init__(self):
        for name in ("core_switch_kw", "aggregation_switch_kw", "edge_switch_kw"):
            _require_number("power", name, getattr(self, name))

    def switch_power(self, core: int, aggregation: int, edge: int) -> float:
        return (
            core * self.core_switch_kw
            + aggregation * self.aggregation_switch_kw
            + edge * self.edge_switch_kw
        )

    def __str__(self) -> str:
        return (
            f"Switch Power:\n"
            f"  Core: {self.core_switch_kw:.1f} kW\n"
            f"  Aggregation: {self.aggregation_switch_kw:.1f} kW\n"
            f"  Edge: {self.edge_switch_kw:.1f} kW"
        )


@dataclass
class NetworkConfig:
    """
    Configuration shared by the topology, metrics and cost code.

    Can be saved to and loaded from JSON; nested pricing and power sections
    map onto SwitchPricing and SwitchPower.
    """

    link_capacity_gbps: float = DEFAULT_LINK_CAPACITY_GBPS
    pricing: SwitchPricing = field(default_factory=SwitchPricing)
    power: SwitchPower = field(default_factory=SwitchPower)

    def __post_init__(self):
        _require_number("config", "link_capacity_gbps", self.link_capacity_gbps, positive=True)
        if not isinstance(self.pricing, SwitchPricing):
            raise ConfigError(f"config.pricing must be SwitchPricing, got {type(self.pricing).__name__}")
        if not isinstance(self.power, SwitchPower):
            raise ConfigError(f"config.power must be SwitchPower, got {type(self.power).__name__}")

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "NetworkConfig":
        data = dict(data)
        known = {"link_capacity_gbps", "pricing", "power"}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        try:
            pricing = SwitchPricing(**data.pop("pricing", {}))
            power = SwitchPower(**data.pop("power", {}))
        except TypeError as e:
            raise ConfigError(f"Invalid config section: {e}") from e
        return cls(pricing=pricing, power=power, **data)

    def save(self, filepath: Union[str, Path]) -> None:
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> "NetworkConfig":
        with open(filepath) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Malformed config file {filepath}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {filepath} must contain a JSON object")
        return cls.from_dict(data)

    def __str__(self) -> str:
        return (
            f"NetworkConfig:\n"
            f"  Link capacity: {self.link_capacity_gbps:g} Gbps\n"
            f"{self.pricing}\n"
            f"{self.power}"
        )


# =============================================================================
# Preset Configurations
# =============================================================================

def get_default_config() -> NetworkConfig:
    return NetworkConfig()


def get_commodity_config() -> NetworkConfig:
    """Commodity 1 GbE build-out with cheaper switches."""
    return NetworkConfig(
        link_capacity_gbps=1.0,
        pricing=SwitchPricing(
            core_switch_price=8_000.0,
            aggregation_switch_price=5_000.0,
            edge_switch_price=2_500.0,
            link_cost_per_gbps=50.0,
        ),
        power=SwitchPower(core_switch_kw=1.0, aggregation_switch_kw=0.8, edge_switch_kw=0.5),
    )


def get_high_capacity_config() -> NetworkConfig:
    """100 GbE fabric."""
    return NetworkConfig(
        link_capacity_gbps=100.0,
        pricing=SwitchPricing(
            core_switch_price=120_000.0,
            aggregation_switch_price=80_000.0,
            edge_switch_price=40_000.0,
            link_cost_per_gbps=20.0,
        ),
        power=SwitchPower(core_switch_kw=8.0, aggregation_switch_kw=6.0, edge_switch_kw=4.0),
    )

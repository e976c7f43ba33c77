"""Service configuration loaded from a JSON document."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

_UINT32_LIMIT = 2**32


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data[key]
    if not isinstance(value, Mapping):
        raise TypeError(f"{key!r} must be an object, got {type(value).__name__}")
    return value


def _string(data: Mapping[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key!r} must be a string, got {type(value).__name__}")
    return value


def _uint32(data: Mapping[str, Any], key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key!r} must be an integer, got {type(value).__name__}")
    if not 0 <= value < _UINT32_LIMIT:
        raise ValueError(f"{key!r} out of range for an unsigned 32-bit value: {value}")
    return value


@dataclass
class LogConfig:
    log_path: str = "/home/admin/log"

    @classmethod
    def _from_json(cls, data: Mapping[str, Any]) -> LogConfig:
        return cls(log_path=_string(data, "path"))


@dataclass
class DataConfig:
    source_data_path: str = "/data/storage/dataset/pre_deal_result"
    output_data_path: str = "/data/pir_meta/pir_result"

    @classmethod
    def _from_json(cls, data: Mapping[str, Any]) -> DataConfig:
        return cls(
            source_data_path=_string(data, "sourceDataPath"),
            output_data_path=_string(data, "outputDataPath"),
        )


@dataclass
class GrpcConfig:
    self_port: int = 12600
    other_port: int = 12600

    @classmethod
    def _from_json(cls, data: Mapping[str, Any]) -> GrpcConfig:
        return cls(
            self_port=_uint32(data, "selfPort"),
            other_port=_uint32(data, "otherPort"),
        )


@dataclass
class PsiConfig:
    """Placeholder section; its JSON content is accepted and ignored."""

    @classmethod
    def _from_json(cls, data: Mapping[str, Any]) -> PsiConfig:
        return cls()


@dataclass
class PirConfig:
    oprf_key_path: str = "/home/admin/pir/oprf_key"
    apsi_setup_path: str = "/home/admin/pir/setup"
    data_meta_path: str = "/data/pir_meta"
    default_algo: str = "SE"
    count_per_query: int = 256
    max_label_length: int = 32

    @classmethod
    def _from_json(cls, data: Mapping[str, Any]) -> PirConfig:
        return cls(
            oprf_key_path=_string(data, "oprfKeyPath"),
            apsi_setup_path=_string(data, "apsiSetupPath"),
            data_meta_path=_string(data, "dataMetaPath"),
            default_algo=_string(data, "defaultAlgo"),
            count_per_query=_uint32(data, "countPerQuery"),
            max_label_length=_uint32(data, "maxLabelLength"),
        )


@dataclass
class GatewayConfig:
    port: int = 12000

    @classmethod
    def _from_json(cls, data: Mapping[str, Any]) -> GatewayConfig:
        return cls(port=_uint32(data, "port"))


@dataclass
class ProxyConfig:
    proxy_mode: int = 0
    gateway_config: GatewayConfig = field(default_factory=GatewayConfig)

    @classmethod
    def _from_json(cls, data: Mapping[str, Any]) -> ProxyConfig:
        return cls(
            proxy_mode=_uint32(data, "proxyMode"),
            gateway_config=GatewayConfig._from_json(_section(data, "gatewayConfig")),
        )


@dataclass
class HttpConfig:
    port: int = 12601

    @classmethod
    def _from_json(cls, data: Mapping[str, Any]) -> HttpConfig:
        return cls(port=_uint32(data, "port"))


@dataclass
class GlobalConfig:
    log_config: LogConfig = field(default_factory=LogConfig)
    data_config: DataConfig = field(default_factory=DataConfig)
    psi_config: PsiConfig = field(default_factory=PsiConfig)
    pir_config: PirConfig = field(default_factory=PirConfig)
    proxy_config: ProxyConfig = field(default_factory=ProxyConfig)
    grpc_config: GrpcConfig = field(default_factory=GrpcConfig)
    http_config: HttpConfig = field(default_factory=HttpConfig)


# Sections read from the top-level document; "httpConfig" is not among them.
_SECTIONS = (
    ("logConfig", "log_config", LogConfig),
    ("dataConfig", "data_config", DataConfig),
    ("proxyConfig", "proxy_config", ProxyConfig),
    ("grpcConfig", "grpc_config", GrpcConfig),
    ("psiConfig", "psi_config", PsiConfig),
    ("pirConfig", "pir_config", PirConfig),
)

_current = GlobalConfig()


def parse_global_config(data: Mapping[str, Any]) -> GlobalConfig:
    """Build a GlobalConfig from a decoded JSON object.

    Absent sections keep their defaults; a present section must hold all of
    its fields, otherwise KeyError is raised.
    """
    if not isinstance(data, Mapping):
        raise TypeError(f"configuration must be an object, got {type(data).__name__}")
    sections = {
        attr: kind._from_json(_section(data, key))
        for key, attr, kind in _SECTIONS
        if key in data
    }
    return GlobalConfig(**sections)


def init_global_config(file_path: str | Path) -> GlobalConfig:
    """Load the process-wide configuration from a JSON file and return it."""
    global _current
    with open(file_path, encoding="utf-8") as handle:
        data = json.load(handle)
    _current = parse_global_config(data)
    return _current


def get_global_config() -> GlobalConfig:
    """Return the process-wide configuration."""
    return _current
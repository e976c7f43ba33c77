import json

import pytest

from pirkit.config import (
    GlobalConfig,
    get_global_config,
    init_global_config,
    parse_global_config,
)


def test_default_values():
    config = GlobalConfig()
    assert config.proxy_config.proxy_mode == 0
    assert config.proxy_config.gateway_config.port == 12000
    assert config.grpc_config.self_port == 12600
    assert config.grpc_config.other_port == 12600
    assert config.log_config.log_path == "/home/admin/log"


def test_get_global_config_starts_with_defaults_shape():
    config = get_global_config()
    assert config.pir_config.default_algo in {"SE"} or config.pir_config.default_algo
    assert get_global_config() is config


def test_log_only():
    config = parse_global_config({"logConfig": {"path": "haha"}})
    assert config.log_config.log_path == "haha"
    assert config.proxy_config.proxy_mode == 0
    assert config.proxy_config.gateway_config.port == 12000
    assert config.grpc_config.self_port == 12600
    assert config.grpc_config.other_port == 12600


def test_full_sections():
    data = {
        "logConfig": {"path": "/home/admin/log"},
        "proxyConfig": {"proxyMode": 99, "gatewayConfig": {"port": 123}},
        "grpcConfig": {"selfPort": 234, "otherPort": 234},
    }
    config = parse_global_config(data)
    assert config.log_config.log_path == "/home/admin/log"
    assert config.proxy_config.proxy_mode == 99
    assert config.proxy_config.gateway_config.port == 123
    assert config.grpc_config.self_port == 234
    assert config.grpc_config.other_port == 234


def test_init_global_config_reads_file(tmp_path):
    data = {
        "logConfig": {"path": "/home/admin/log"},
        "proxyConfig": {"proxyMode": 99, "gatewayConfig": {"port": 123}},
        "grpcConfig": {"selfPort": 234, "otherPort": 234},
        "pirConfig": {
            "oprfKeyPath": "/k",
            "apsiSetupPath": "/s",
            "dataMetaPath": "/m",
            "defaultAlgo": "SE",
            "countPerQuery": 128,
            "maxLabelLength": 64,
        },
    }
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    config = init_global_config(path)
    assert get_global_config() is config
    assert config.proxy_config.proxy_mode == 99
    assert config.grpc_config.self_port == 234
    assert config.pir_config.oprf_key_path == "/k"
    assert config.pir_config.data_meta_path == "/m"
    assert config.pir_config.count_per_query == 128
    assert config.pir_config.max_label_length == 64


def test_data_config_section():
    config = parse_global_config(
        {"dataConfig": {"sourceDataPath": "/in", "outputDataPath": "/out"}}
    )
    assert config.data_config.source_data_path == "/in"
    assert config.data_config.output_data_path == "/out"


def test_http_section_is_not_read():
    config = parse_global_config({"httpConfig": {"port": 1}})
    assert config.http_config.port == 12601


def test_psi_section_accepted_and_empty():
    config = parse_global_config({"psiConfig": {"anything": 1}})
    assert config == GlobalConfig()


def test_missing_field_in_present_section():
    with pytest.raises(KeyError):
        parse_global_config({"grpcConfig": {"selfPort": 1}})


def test_missing_nested_gateway():
    with pytest.raises(KeyError):
        parse_global_config({"proxyConfig": {"proxyMode": 1}})


def test_wrong_type_rejected():
    with pytest.raises(TypeError):
        parse_global_config({"logConfig": {"path": 5}})


def test_negative_port_rejected():
    with pytest.raises(ValueError):
        parse_global_config({"grpcConfig": {"selfPort": -1, "otherPort": 1}})


def test_non_object_document_rejected():
    with pytest.raises(TypeError):
        parse_global_config([1, 2])
# Tests for src/geomag/config.py

import pytest

from geomag import config
from geomag.config import (
    Config,
    DEFAULT_COF_FILE,
    DEFAULT_GEOID_FILE,
    LoggingConfig,
    ModelConfig,
    get_config,
    load_config,
    set_config,
    validate_config,
)


def write_yaml(tmp_path, text):
    path = tmp_path / "settings.yaml"
    path.write_text(text)
    return str(path)


def test_defaults():
    cfg = Config()
    assert cfg.cof_path() == DEFAULT_COF_FILE
    assert cfg.geoid_path() == DEFAULT_GEOID_FILE
    assert cfg.model.validity_years == 5.0
    assert cfg.model.max_degree == 12
    assert cfg.logging.level == "INFO"
    assert DEFAULT_COF_FILE.is_file()


def test_default_config_is_valid():
    assert validate_config(Config()) == []


def test_validate_config_collects_all_errors(tmp_path):
    cfg = Config(
        model=ModelConfig(cof_file=str(tmp_path / "missing.COF"), validity_years=0.0,
                          max_degree=13),
        logging=LoggingConfig(level="LOUD"),
    )
    errors = validate_config(cfg)
    assert len(errors) == 4
    assert any("missing.COF" in e for e in errors)
    assert any("LOUD" in e for e in errors)


def test_load_config(tmp_path):
    path = write_yaml(tmp_path, f"""
model:
  cof_file: {DEFAULT_COF_FILE}
  validity_years: 10
geoid:
  grid_file: /data/WW15MGH.GRD
logging:
  level: debug
""")
    cfg = load_config(path)
    assert cfg.cof_path() == DEFAULT_COF_FILE
    assert cfg.model.validity_years == 10
    assert str(cfg.geoid_path()) == "/data/WW15MGH.GRD"
    assert cfg.logging.level == "debug"
    assert cfg.model.max_degree == 12


def test_load_empty_config_gives_defaults(tmp_path):
    cfg = load_config(write_yaml(tmp_path, ""))
    assert cfg == Config()


@pytest.mark.parametrize(
        "text,message",

        [
            ("- model\n- geoid\n", "must contain a mapping"),
            ("model:\n  epoch: 2015\n", "Invalid configuration"),
            ("model:\n  cof_file: /nowhere/WMM.COF\n", "Coefficient file not found"),
            ("logging:\n  level: chatty\n", "Unknown logging level"),
        ]
)
def test_load_config_errors(tmp_path, text, message):
    with pytest.raises(ValueError, match=message):
        load_config(write_yaml(tmp_path, text))


def test_set_config_updates_shared_instance():
    shared = get_config()
    set_config(Config(model=ModelConfig(validity_years=7.0)))
    assert get_config() is shared
    assert shared.model.validity_years == 7.0


def test_set_data_files():
    config.set_cof_file("/data/WMM2020.COF")
    config.set_geoid_file("/data/WW15MGH.GRD")
    assert str(get_config().cof_path()) == "/data/WMM2020.COF"
    assert str(get_config().geoid_path()) == "/data/WW15MGH.GRD"
    config.set_cof_file(None)
    assert get_config().cof_path() == DEFAULT_COF_FILE

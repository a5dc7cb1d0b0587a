# Tests for src/geomag/main.py

import logging

import pytest

from geomag.config import DEFAULT_COF_FILE
from geomag.exceptions import ModelValidityWarning
from geomag.main import main, parse_arguments


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("geomag")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def test_parse_arguments():
    args = parse_arguments(["40:00:54N", "105:16:12W", "5400ft", "2017.5", "--msl"])
    assert args.latitude == pytest.approx(40.015)
    assert args.longitude == pytest.approx(-105.27)
    assert args.height == pytest.approx(1645.92)
    assert args.date.year == 2017
    assert args.msl
    assert not args.spherical


def test_parse_arguments_date_is_optional():
    assert parse_arguments(["0", "0", "0"]).date is None


def test_bad_latitude_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(["north", "0", "0"])
    assert excinfo.value.code == 2


def test_report_for_reference_point(capsys):
    main(["-80", "240", "100000", "2017.5", "--spherical"])
    out = capsys.readouterr().out
    assert "Model: WMM-2015" in out
    assert "Date: 2017.5000" in out
    assert "outside validity window" not in out
    assert "52611.1nT" in out
    assert "Spherical axes:" in out
    assert "-50169.4nT" in out


def test_report_without_spherical_axes(capsys):
    main(["10", "20", "0", "2016-03-01"])
    assert "Spherical axes:" not in capsys.readouterr().out


def test_height_above_sea_level_uses_geoid_file(capsys, coarse_grd_file):
    main(["60", "30", "10", "2017.5", "--msl", "--geoid-file", str(coarse_grd_file)])
    assert "height 11.5 m (ellipsoid)" in capsys.readouterr().out


def test_height_above_sea_level_without_geoid_fails(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["60", "30", "10", "2017.5", "--msl", "--geoid-file", str(tmp_path / "none.GRD")])
    assert excinfo.value.code == 1


def test_missing_coefficient_file_fails(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["0", "0", "0", "2017.5", "--cof-file", str(tmp_path / "missing.COF")])
    assert excinfo.value.code == 1


def test_invalid_coefficient_file_fails(tmp_path):
    path = tmp_path / "broken.COF"
    path.write_text("2015.0 BROKEN 12/15/2014\n 1 0 x 0 0 0\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["0", "0", "0", "2017.5", "--cof-file", str(path)])
    assert excinfo.value.code == 1


def test_date_outside_validity_window_is_reported(capsys):
    with pytest.warns(ModelValidityWarning):
        main(["0", "0", "0", "2022.0"])
    assert "(outside validity window)" in capsys.readouterr().out


def test_configuration_file(tmp_path, capsys):
    log_file = tmp_path / "geomag.log"
    settings = tmp_path / "settings.yaml"
    settings.write_text(f"""
model:
  cof_file: {DEFAULT_COF_FILE}
logging:
  level: INFO
  log_file: {log_file}
""")
    main(["0", "0", "0", "2017.5", "--config", str(settings)])
    assert "Model: WMM-2015" in capsys.readouterr().out
    assert "Loaded WMM-2015 coefficients" in log_file.read_text()

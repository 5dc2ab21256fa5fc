import configparser

from trackdiag_lib.config_service import ConfigService
from trackdiag_lib.layout import DEFAULT_STYLES


def test_missing_file_is_created_with_defaults(tmp_path):
    path = tmp_path / "nested" / "trackdiag.cfg"
    settings = ConfigService(str(path)).get_settings()

    assert path.exists()
    assert settings["Style"]["ink"] == DEFAULT_STYLES["ink"]
    assert settings["Labels"]["top_track"]
    assert settings["Output"]["basename"] == "track-diagram"


def test_file_values_override_defaults(tmp_path):
    path = tmp_path / "trackdiag.cfg"
    path.write_text("[Style]\nink = #112233\n\n[Labels]\ntitle = Works\n")

    service = ConfigService(str(path))

    assert service.styles["ink"] == "#112233"
    assert service.styles["muted"] == DEFAULT_STYLES["muted"]
    assert service.labels["title"] == "Works"


def test_save_settings_round_trip(tmp_path):
    path = tmp_path / "trackdiag.cfg"
    service = ConfigService(str(path))
    settings = service.get_settings()
    settings["Output"]["basename"] = "diagram"
    service.save_settings(settings)

    parser = configparser.ConfigParser(interpolation=None)
    parser.read(path)
    assert parser["Output"]["basename"] == "diagram"
    assert ConfigService(str(path)).get_settings()["Output"]["basename"] == "diagram"


def test_unwritable_path_is_logged_not_raised(tmp_path, caplog):
    blocker = tmp_path / "file"
    blocker.write_text("")
    service = ConfigService(str(blocker / "trackdiag.cfg"))

    settings = service.get_settings()

    assert settings["Output"]["basename"] == "track-diagram"
    assert "Failed to write settings" in caplog.text

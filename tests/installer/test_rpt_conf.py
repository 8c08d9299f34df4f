import pytest

from asl_common.exceptions import InstallationError
from asl_installer.rpt_conf import (
    RptConf,
    insert_after_matching,
    insert_before_matching,
    set_option,
)


def test_insert_after_matching():
    text = "[functions]\n1 = ilink,1\n"
    assert insert_after_matching(text, "[functions]", ["A", "B"]) == (
        "[functions]\nA\nB\n1 = ilink,1\n"
    )


def test_insert_after_matching_every_section():
    text = "[functions]\nx\n[functions]\ny"
    assert insert_after_matching(text, "[functions]", ["A"]) == (
        "[functions]\nA\nx\n[functions]\nA\ny"
    )


def test_insert_before_matching():
    text = "a\ntailsquashedtime=30000\nb"
    assert insert_before_matching(text, "tailsquashedtime=30000", ["T"]) == (
        "a\nT\ntailsquashedtime=30000\nb"
    )


@pytest.mark.parametrize(
    "line, expected",
    [
        ("#tailmessagetime=900000", "tailmessagetime=600000"),
        ("tailmessagetime=900000", "tailmessagetime=600000"),
        ("tailmessagetime = 900000 ; comment", "tailmessagetime=600000"),
        (";tailmessagetime=900000", ";tailmessagetime=600000"),
        ("unrelated=1", "unrelated=1"),
    ],
)
def test_set_option(line, expected):
    assert set_option(line, "tailmessagetime", "600000") == expected


def test_missing_file_is_noop(app_settings):
    rpt_conf = RptConf(app_settings.conf_file, app_settings)

    assert rpt_conf.exists() is False
    assert rpt_conf.ensure_function_lines("SMUPDATE=", ["SMUPDATE=cmd,x"]) is False
    assert rpt_conf.set_options(tailmessagetime="600000") is False
    assert rpt_conf.ensure_line_before("x", "y", "z") is False
    assert rpt_conf.backup("supermon") is None
    assert not app_settings.conf_file.exists()


def test_ensure_function_lines_is_idempotent(rpt_conf_file, app_settings):
    rpt_conf = RptConf(rpt_conf_file, app_settings)

    assert rpt_conf.ensure_function_lines("SMUPDATE=", ["SMUPDATE=cmd,/x"]) is True
    first = rpt_conf_file.read_text()
    assert rpt_conf.ensure_function_lines("SMUPDATE=", ["SMUPDATE=cmd,/x"]) is False

    assert rpt_conf_file.read_text() == first
    assert first.count("SMUPDATE=") == 1
    assert "[functions]\nSMUPDATE=cmd,/x\n1 = ilink,1" in first


def test_ensure_function_lines_without_section(tmp_path, app_settings):
    conf = tmp_path / "rpt.conf"
    conf.write_text("[1999]\nduplex = 1\n")
    rpt_conf = RptConf(conf, app_settings)

    assert rpt_conf.ensure_function_lines("SMUPDATE=", ["SMUPDATE=cmd,/x"]) is False
    assert conf.read_text() == "[1999]\nduplex = 1\n"


def test_set_options_second_run_unchanged(rpt_conf_file, app_settings):
    rpt_conf = RptConf(rpt_conf_file, app_settings)

    assert rpt_conf.set_options(tailmessagetime="600000", tailsquashedtime="30000") is True
    assert rpt_conf.set_options(tailmessagetime="600000", tailsquashedtime="30000") is False

    content = rpt_conf_file.read_text()
    assert "\ntailmessagetime=600000\n" in content
    assert "\ntailsquashedtime=30000\n" in content


def test_ensure_line_before_guarded_by_pattern(rpt_conf_file, app_settings):
    rpt_conf = RptConf(rpt_conf_file, app_settings)
    rpt_conf.set_options(tailsquashedtime="30000")

    line = "tailmessagelist = /tmp/SkywarnPlus/wx-tail"
    assert rpt_conf.ensure_line_before(r"tailmessagelist.*SkywarnPlus", "tailsquashedtime=30000", line)
    assert not rpt_conf.ensure_line_before(r"tailmessagelist.*SkywarnPlus", "tailsquashedtime=30000", line)

    content = rpt_conf_file.read_text()
    assert content.count(line) == 1
    assert f"{line}\ntailsquashedtime=30000" in content


def test_backup_creates_copy(rpt_conf_file, app_settings):
    backup = RptConf(rpt_conf_file, app_settings).backup("skywarn")

    assert backup.parent == rpt_conf_file.parent
    assert backup.name.startswith("rpt.conf.bak-skywarn-")
    assert backup.read_text() == rpt_conf_file.read_text()


def test_read_error_becomes_installation_error(tmp_path, app_settings):
    directory = tmp_path / "rpt.conf.d"
    directory.mkdir()

    with pytest.raises(InstallationError):
        RptConf(directory, app_settings).read()


def test_non_utf8_rpt_conf_is_edited_bytewise(tmp_path, app_settings):
    conf = tmp_path / "rpt.conf"
    conf.write_bytes(b"; caf\xe9 node\n[functions]\n1 = ilink,1\n")
    rpt_conf = RptConf(conf, app_settings)

    assert rpt_conf.ensure_function_lines("SMUPDATE=", ["SMUPDATE=cmd,/x"]) is True

    assert conf.read_bytes() == (
        b"; caf\xe9 node\n[functions]\nSMUPDATE=cmd,/x\n1 = ilink,1\n"
    )

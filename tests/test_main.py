"""
Tests for the command-line entry point.
"""

import pytest

from conftest import voucher_xml
from tallyprint.main import main


def test_writes_output_file(tmp_path, sample_xml):
    xml_path = tmp_path / "voucher.xml"
    xml_path.write_text(sample_xml, encoding="utf-8")
    out_path = tmp_path / "job.bin"

    with pytest.raises(SystemExit) as exc:
        main([str(xml_path), "--output", str(out_path)])

    assert exc.value.code == 0
    data = out_path.read_bytes()
    assert data.startswith(b"\x1b@")
    assert data.endswith(b"\x1dV\x00")


def test_preview(tmp_path, capsys, sample_xml):
    xml_path = tmp_path / "voucher.xml"
    xml_path.write_text(sample_xml, encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main([str(xml_path), "--preview"])

    assert exc.value.code == 0
    assert "SALES ORDER" in capsys.readouterr().out


def test_mock_print_copies(tmp_path, capsys):
    xml_path = tmp_path / "voucher.xml"
    xml_path.write_text(voucher_xml(voucher_type="Delivery Note"), encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main([str(xml_path), "--mock", "--copies", "2"])

    assert exc.value.code == 0
    assert "Printed 2 copies successfully." in capsys.readouterr().out


def test_extraction_failure_exit_code(tmp_path, capsys):
    xml_path = tmp_path / "bad.xml"
    xml_path.write_text("<ENVELOPE><BODY/></ENVELOPE>", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main([str(xml_path), "--mock"])

    assert exc.value.code == 1
    assert "VOUCHER" in capsys.readouterr().err

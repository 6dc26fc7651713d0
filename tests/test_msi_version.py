import pytest

from cwagent_testkit.msi_version import main, replace_value, to_msi_version


def test_small_second_field_becomes_patch():
    assert to_msi_version("1.5.0") == "1.0.5"


@pytest.mark.parametrize(
    "version", ["1.300032.0", "1.65536.1", "2.65535.7", "1.247359.0", "3.131072"]
)
def test_split_recombines_to_second_field(version):
    major, minor, patch = to_msi_version(version).split(".")
    parts = version.split(".")
    assert major == parts[0]
    assert 0 <= int(patch) < 65536
    assert int(minor) * 65536 + int(patch) == int(parts[1])


@pytest.mark.parametrize("version", ["1", "", "1.x.0", "1..0", "1.2b.0"])
def test_bad_version_raises(version):
    with pytest.raises(ValueError, match="Failed to parse agentVersion"):
        to_msi_version(version)


def test_replace_value_replaces_all(tmp_path):
    target = tmp_path / "product.wxs"
    target.write_text("Version='KEY' other='KEY'")
    replace_value(target, "KEY", "9.9.9")
    assert target.read_text() == "Version='9.9.9' other='9.9.9'"


def test_main_writes_msi_version(tmp_path):
    target = tmp_path / "product.wxs"
    target.write_text("v=MSI_VERSION")
    assert main(["1.5.0", str(target), "MSI_VERSION"]) == 0
    assert target.read_text() == "v=" + to_msi_version("1.5.0")


def test_main_bad_version_leaves_file(tmp_path):
    target = tmp_path / "product.wxs"
    target.write_text("v=MSI_VERSION")
    assert main(["1", str(target), "MSI_VERSION"]) == 1
    assert target.read_text() == "v=MSI_VERSION"
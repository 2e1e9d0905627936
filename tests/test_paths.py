import pytest

from guixinstall.disk.paths import format_size, partition_path


@pytest.mark.parametrize(
    "device,num,expected",
    [
        ("/dev/sda", 1, "/dev/sda1"),
        ("/dev/sda", 2, "/dev/sda2"),
        ("/dev/sdb", 1, "/dev/sdb1"),
        ("/dev/sdb", 3, "/dev/sdb3"),
    ],
)
def test_partition_path_sata(device, num, expected):
    assert partition_path(device, num) == expected


@pytest.mark.parametrize(
    "num,expected", [(1, "/dev/nvme0n1p1"), (2, "/dev/nvme0n1p2")]
)
def test_partition_path_nvme(num, expected):
    assert partition_path("/dev/nvme0n1", num) == expected


@pytest.mark.parametrize(
    "num,expected", [(1, "/dev/mmcblk0p1"), (2, "/dev/mmcblk0p2")]
)
def test_partition_path_mmc(num, expected):
    assert partition_path("/dev/mmcblk0", num) == expected


@pytest.mark.parametrize(
    "size,expected",
    [
        (120_000_000_000, "120 GB"),
        (512_000_000_000, "512 GB"),
        (8_000_000_000, "8.0 GB"),
    ],
)
def test_format_size_gigabytes(size, expected):
    assert format_size(size) == expected


@pytest.mark.parametrize(
    "size,expected",
    [
        (1_000_000_000_000, "1.0 TB"),
        (2_000_000_000_000, "2.0 TB"),
        (10_000_000_000_000, "10 TB"),
    ],
)
def test_format_size_terabytes(size, expected):
    assert format_size(size) == expected
from collections import namedtuple

import psutil

from host_probe import system_state

Partition = namedtuple("Partition", "device mountpoint fstype opts")
Usage = namedtuple("Usage", "total used free percent")
VirtualMemory = namedtuple("VirtualMemory", "total available used")
Swap = namedtuple("Swap", "total used")
Freq = namedtuple("Freq", "current min max")


def patch_psutil(monkeypatch, *, partitions, usage, freq=Freq(2450.7, 0, 0)):
    monkeypatch.setattr(psutil, "cpu_percent", lambda interval=None, percpu=False: [10.0, 20.5])
    monkeypatch.setattr(psutil, "cpu_freq", lambda: freq)
    monkeypatch.setattr(psutil, "virtual_memory", lambda: VirtualMemory(total=8 * 1024**3, available=3 * 1024**3, used=4))
    monkeypatch.setattr(psutil, "swap_memory", lambda: Swap(total=1024**3, used=1024**2))
    monkeypatch.setattr(psutil, "disk_partitions", lambda all=False: partitions)
    monkeypatch.setattr(psutil, "disk_usage", usage)


def test_collect_snapshot(monkeypatch):
    partitions = [Partition("/dev/sda1", "/", "ext4", "rw")]
    patch_psutil(monkeypatch, partitions=partitions, usage=lambda path: Usage(100 * 1024**3, 60 * 1024**3, 40 * 1024**3, 60.0))

    snapshot = system_state.collect_snapshot()

    assert snapshot.cpu_count == 2
    assert snapshot.cpu_usages == [10.0, 20.5]
    assert snapshot.cpu_frequency_mhz == 2450
    assert snapshot.memory_total == 8 * 1024**3
    assert snapshot.memory_used == 5 * 1024**3
    assert snapshot.memory_free == 3 * 1024**3
    assert snapshot.swap_used == 1024**2
    assert isinstance(snapshot.os_name, str)
    assert isinstance(snapshot.host_name, str)

    disk = snapshot.disks[0]
    assert (disk.name, disk.mount_point, disk.file_system) == ("/dev/sda1", "/", "ext4")
    assert disk.available_space == 40 * 1024**3
    assert disk.used_space == 60 * 1024**3
    assert disk.usage_percent == 60.0


def test_unreadable_disk_is_listed_without_capacity(monkeypatch):
    def deny(path):
        raise PermissionError(path)

    patch_psutil(monkeypatch, partitions=[Partition("/dev/sdb1", "/secret", "ext4", "rw")], usage=deny)

    snapshot = system_state.collect_snapshot()

    disk = snapshot.disks[0]
    assert disk.total_space == 0
    assert disk.usage_percent is None


def test_missing_cpu_frequency_defaults_to_zero(monkeypatch):
    patch_psutil(monkeypatch, partitions=[], usage=None, freq=None)

    snapshot = system_state.collect_snapshot()

    assert snapshot.cpu_frequency_mhz == 0
    assert snapshot.disks == []

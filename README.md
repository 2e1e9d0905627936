# guixinstall

Building blocks for installing Guix System onto a disk. The package
describes the system to install, validates what a user enters, works out
the exact commands needed to partition, encrypt, format and mount the
target disk, and checks the machine for devices that need non-free
firmware.

It is a library: the functions that plan work return plain lists of
commands or `Action` objects, so a caller can show them, log them or
run them.

## Requirements

Python 3.10 or later on Linux. No third-party libraries are needed.
Running the planned commands needs the usual tools on the live system
(`parted`, `sgdisk`, `cryptsetup`, `mkfs.ext4`, `mkfs.btrfs`,
`mkfs.fat`, `tune2fs`, `mount`, `mkswap`, `swapon`, `lsblk`, `herd`)
and root privileges; building the plans needs neither.

## Describing the system

`guixinstall.config.SystemConfig` is a dataclass holding everything
about the target system: firmware (`Firmware.EFI` or `Firmware.BIOS`),
hostname, timezone (default `Europe/Berlin`), locale (default
`en_US.utf8`), keyboard layout, disk (`BlockDevice`), root filesystem
(`Filesystem.EXT4` or `Filesystem.BTRFS`), optional LUKS settings
(`EncryptionConfig`), user accounts (`UserAccount`), an optional
`DesktopEnvironment`, an SSH key, the swap size in MiB (default 4096)
and an optional replacement text for the system configuration file.

By default the firmware comes from `Firmware.detect()`, which looks for
`/sys/firmware/efi`, and the hostname from
`generate_hostname("panther")`, which appends a dash and six random
lowercase letters or digits to the prefix.

## Validating input

Each validator returns nothing on success and raises `ValidationError`
(a `ValueError`) with a readable message otherwise.

```python
from guixinstall.config import ValidationError, validate_hostname, validate_username

validate_hostname("my-host")      # accepted
try:
    validate_username("1bad")
except ValidationError as err:
    print(err)                    # username must start with a lowercase letter or underscore
```

`validate_ssh_public_key` checks an `authorized_keys`-style line by
decoding its base64 body and comparing the length-prefixed algorithm
name inside it with the line's prefix; `validate_config_id` accepts only
letters, digits, `-` and `_`.

## Planning disk work

```python
from guixinstall.config import Firmware
from guixinstall.disk.paths import format_size, partition_path
from guixinstall.disk.partition import partition_commands

partition_path("/dev/nvme0n1", 1)    # "/dev/nvme0n1p1"
format_size(120_000_000_000)         # "120 GB"

for command in partition_commands("/dev/sda", Firmware.detect()):
    print(" ".join(command))
```

`guixinstall.disk.format` builds the LUKS (`encryption_commands`), EFI
(`format_efi_commands`) and root filesystem (`format_root_commands`)
commands, and `format_commands` puts them together in that order for a
`SystemConfig`. The root filesystem is labelled `my-root`.

`guixinstall.disk.mount` builds the mount and swap steps as `Action`
objects from `guixinstall.disk.action`: `Cmd`, `Mkdir`,
`CreateSwapFile`, `SetPermissions` and `Mount`. Each carries out its
work through `execute()`. `CreateSwapFile` writes a fully allocated,
zero-filled file with mode 0600.

`guixinstall.disk.detect.detect_block_devices()` lists installable disks
via `lsblk`, leaving out partitions, loop and optical devices, floppies
and anything under 1 MiB; `parse_lsblk_json` does the same for
already captured output, and `format_device` renders one disk as an
aligned line.

## Running commands

`guixinstall.commands.run_cmd` runs a program, captures its output in a
`CommandResult` and raises `CommandError` on a non-zero exit.
`run_cmd_with_stdin` feeds standard input, `run_cmd_streaming` calls a
function for each line of output, `run_cmd_interactive` hands the
terminal to the program and returns its exit code, and
`run_cmd_with_retry` retries while the error message contains one of the
given patterns, waiting 0 s, 60 s and then 300 s between attempts.

## Hardware check

`guixinstall.hardware.detect_unsupported_devices()` returns the PCI
devices whose drivers need non-free firmware, each as an
`UnsupportedDevice` whose `description()` reads like
`8086:24f3 (iwlwifi)`. `uvesafb_loaded()` tells whether the `uvesafb`
module is loaded.

## Enterprise configurations

`guixinstall.enterprise.fetch_enterprise_config` downloads and unpacks a
pre-built configuration archive into `/tmp/guix-install-config`;
`load_extracted_config` reads an already unpacked one, requiring
`system.scm` and picking up `channels.scm` and `config.json` when
present, either at the top level or inside a subdirectory. Failures
raise `EnterpriseConfigError`. `cleanup()` removes the unpacked files.

## What is not included

The package has no installer command and no interactive screens; a
caller drives the steps itself. It does not write the Guix system or
channels configuration files from a `SystemConfig`, and it has no
definitions of install modes: `SystemConfig.mode` is kept exactly as
given.
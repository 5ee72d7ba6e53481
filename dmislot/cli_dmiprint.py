#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import os, sys, argparse, logging
from dataclasses import dataclass
from typing import Optional
import dmislot

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_NOT_FOUND = 3
EXIT_DECODE_ERROR = 4


@dataclass
class ProgramArgs:
    entry_point: Optional[str]
    dmi_table: Optional[str]
    pci: Optional[str]
    all: bool = False
    verbose: bool = False
    verify_checksum: bool = False


def setup_logging(verbose: bool) -> None:
    if verbose or os.getenv("DMISLOT_VERBOSE") == "1":
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="DEBUG:%(name)s: %(message)s",
        )


def format_line(slot: dmislot.SlotMatch) -> str:
    return f"{slot.address.slot_format()}\t{slot.name}"


def run(args: ProgramArgs) -> int:
    setup_logging(args.verbose)

    query: dmislot.SlotQuery
    if args.all:
        query = dmislot.MatchAll()
    else:
        try:
            query = dmislot.MatchExact(dmislot.PciAddress.parse(args.pci or ""))
        except ValueError:
            print(f"ERROR: invalid sBDF: {args.pci}", file=sys.stderr)
            return EXIT_INPUT_ERROR

    paths = dmislot.resolve_paths(args.entry_point, args.dmi_table)
    try:
        tables = dmislot.FirmwareTables.load(
            paths, verify_checksum=args.verify_checksum
        )
        if isinstance(query, dmislot.MatchAll):
            slots = tables.scan_all()
        else:
            name = tables.scan(query)
    except dmislot.SourceError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except dmislot.EntryPointError as e:
        print(f"ERROR: Bad SMBIOS entry point: {e}", file=sys.stderr)
        return EXIT_DECODE_ERROR
    except dmislot.DecodeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_DECODE_ERROR

    if isinstance(query, dmislot.MatchAll):
        for slot in slots:
            print(format_line(slot))
        return EXIT_OK

    if name is None:
        return EXIT_NOT_FOUND
    sys.stdout.write(name)
    sys.stdout.flush()
    return EXIT_OK


def main() -> None:  # pragma: no cover
    ap = argparse.ArgumentParser(
        prog="dmiprint",
        description="Print the SMBIOS System Slot designation of a PCI device",
    )
    ap.add_argument(
        "-e",
        "--entry-point",
        dest="entry_point",
        default=None,
        help="path to smbios_entry_point (default: sysfs)",
    )
    ap.add_argument(
        "-d",
        "--dmi-table",
        dest="dmi_table",
        default=None,
        help="path to the DMI structure table (default: sysfs)",
    )
    mode = ap.add_mutually_exclusive_group(required=True)
    mode.add_argument("-p", "--pci", dest="pci", help="PCI address, SSSS:BB:DD.F")
    mode.add_argument(
        "-a", "--all", dest="all", action="store_true", help="list every PCI slot"
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="debug output")
    ap.add_argument(
        "--verify-checksum",
        action="store_true",
        help="reject entry points whose checksum does not sum to zero",
    )
    sys.exit(run(ProgramArgs(**vars(ap.parse_args()))))


if __name__ == "__main__":  # pragma: no cover
    main()
